"""
Product tag service. Tags are free-form, uniquely named keywords.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy.orm import Session

from product_ethics import audit
from product_ethics.audit import ChangeType
from product_ethics.db import models
from product_ethics.db.repositories import products as product_repo
from product_ethics.db.unit_of_work import transactional
from product_ethics.services.security import client_verified

logger = logging.getLogger(__name__)


class ProductTagService:

    def __init__(self, db: Session):
        self.db = db

    def get_product_tag(self, product_tag_id: uuid.UUID) -> Optional[models.ProductTag]:
        return product_repo.get_product_tag(self.db, product_tag_id)

    def get_product_tag_by_name(self, name: str) -> Optional[models.ProductTag]:
        if not name:
            return None
        return product_repo.get_product_tag_by_name(self.db, name.strip().lower())

    @client_verified
    @transactional
    def create_product_tag(self, client: models.Client, name: str) -> models.ProductTag:
        if not name or not name.strip():
            raise ValueError("Product tag name must be provided")
        normalized = name.strip().lower()
        if product_repo.get_product_tag_by_name(self.db, normalized) is not None:
            raise ValueError(f"Product tag '{normalized}' already exists")
        tag = product_repo.create_product_tag(self.db, normalized, creator_id=client.id)
        audit.log_product_tag(self.db, client=client, product_tag_id=tag.id, change_type=ChangeType.CREATED, text=normalized)
        return tag
