"""
Change log helpers and enums.

Centralized helpers to append change log records with a consistent schema;
includes convenience wrappers per entity type.
"""
from __future__ import annotations
import logging
import uuid
from enum import Enum
from typing import Optional
from sqlalchemy.orm import Session

from product_ethics.db import models, schemas
from product_ethics.db.repositories import changelog as changelog_repo

logger = logging.getLogger(__name__)


class ChangedEntityType(str, Enum):
    UNKNOWN = "unknown"
    PRODUCT = "product"
    PRODUCT_CATEGORY = "product_category"
    PRODUCT_LABEL = "product_label"
    PRODUCT_TAG = "product_tag"
    COMPANY = "company"
    STORE = "store"
    INFO_SOURCE = "info_source"
    INFO_SOURCE_REFERENCE = "info_source_reference"
    INFO_CHANNEL = "info_channel"
    RECOMMENDATION = "recommendation"


class ChangeType(str, Enum):
    UNKNOWN = "unknown"
    CREATED = "created"
    EDITED = "edited"


def log_change(
    db: Session,
    *,
    client: models.Client,
    entity_type: ChangedEntityType | str = ChangedEntityType.UNKNOWN,
    entity_id: Optional[uuid.UUID] = None,
    change_type: ChangeType | str = ChangeType.UNKNOWN,
    change_text: Optional[str] = None,
) -> models.ChangeLog:
    """Append a change log entry for an action performed by ``client``."""
    # Persist plain string values, not Enum reprs
    entity_value = entity_type.value if isinstance(entity_type, ChangedEntityType) else str(entity_type)
    change_value = change_type.value if isinstance(change_type, ChangeType) else str(change_type)
    entry = schemas.ChangeLogCreate(
        changed_entity_type=entity_value,
        entity_id=entity_id,
        change_type=change_value,
        change_text=change_text,
    )
    logger.debug("Change log: client=%s %s %s %s", client.id, change_value, entity_value, entity_id)
    return changelog_repo.create_change_log(db, change_log=entry, client_id=client.id)


__all__ = ["ChangedEntityType", "ChangeType", "log_change"]


# Convenience wrappers per entity type
def log_product(db: Session, *, client: models.Client, product_id: uuid.UUID, change_type: ChangeType, text: Optional[str] = None):
    return log_change(db, client=client, entity_type=ChangedEntityType.PRODUCT, entity_id=product_id, change_type=change_type, change_text=text)

def log_product_category(db: Session, *, client: models.Client, product_category_id: uuid.UUID, change_type: ChangeType, text: Optional[str] = None):
    return log_change(db, client=client, entity_type=ChangedEntityType.PRODUCT_CATEGORY, entity_id=product_category_id, change_type=change_type, change_text=text)

def log_product_label(db: Session, *, client: models.Client, product_label_id: uuid.UUID, change_type: ChangeType, text: Optional[str] = None):
    return log_change(db, client=client, entity_type=ChangedEntityType.PRODUCT_LABEL, entity_id=product_label_id, change_type=change_type, change_text=text)

def log_product_tag(db: Session, *, client: models.Client, product_tag_id: uuid.UUID, change_type: ChangeType, text: Optional[str] = None):
    return log_change(db, client=client, entity_type=ChangedEntityType.PRODUCT_TAG, entity_id=product_tag_id, change_type=change_type, change_text=text)

def log_company(db: Session, *, client: models.Client, company_id: uuid.UUID, change_type: ChangeType, text: Optional[str] = None):
    return log_change(db, client=client, entity_type=ChangedEntityType.COMPANY, entity_id=company_id, change_type=change_type, change_text=text)

def log_store(db: Session, *, client: models.Client, store_id: uuid.UUID, change_type: ChangeType, text: Optional[str] = None):
    return log_change(db, client=client, entity_type=ChangedEntityType.STORE, entity_id=store_id, change_type=change_type, change_text=text)

def log_info_source(db: Session, *, client: models.Client, info_source_id: uuid.UUID, change_type: ChangeType, text: Optional[str] = None):
    return log_change(db, client=client, entity_type=ChangedEntityType.INFO_SOURCE, entity_id=info_source_id, change_type=change_type, change_text=text)

def log_info_source_reference(db: Session, *, client: models.Client, info_source_reference_id: uuid.UUID, change_type: ChangeType, text: Optional[str] = None):
    return log_change(db, client=client, entity_type=ChangedEntityType.INFO_SOURCE_REFERENCE, entity_id=info_source_reference_id, change_type=change_type, change_text=text)

def log_info_channel(db: Session, *, client: models.Client, info_channel_id: uuid.UUID, change_type: ChangeType, text: Optional[str] = None):
    return log_change(db, client=client, entity_type=ChangedEntityType.INFO_CHANNEL, entity_id=info_channel_id, change_type=change_type, change_text=text)

def log_recommendation(db: Session, *, client: models.Client, recommendation_id: uuid.UUID, change_type: ChangeType, text: Optional[str] = None):
    return log_change(db, client=client, entity_type=ChangedEntityType.RECOMMENDATION, entity_id=recommendation_id, change_type=change_type, change_text=text)

__all__.extend([
    "log_product",
    "log_product_category",
    "log_product_label",
    "log_product_tag",
    "log_company",
    "log_store",
    "log_info_source",
    "log_info_source_reference",
    "log_info_channel",
    "log_recommendation",
])
