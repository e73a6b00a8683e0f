"""
Info source and info source reference repository functions.
"""
from __future__ import annotations

import uuid
from typing import Iterable, List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from product_ethics.db import models


def create_info_source(db: Session, domains: List[str], creator_id: Optional[uuid.UUID] = None):
    db_source = models.InfoSource(creator_id=creator_id)
    db_source.domains = [models.InfoSourceDomain(domain=d) for d in domains]
    db.add(db_source)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        raise ValueError(f"Domain already belongs to another info source: {', '.join(domains)}") from e
    db.refresh(db_source)
    return db_source


def get_info_source(db: Session, info_source_id: uuid.UUID):
    return db.query(models.InfoSource).filter(models.InfoSource.id == info_source_id).first()


def get_info_source_by_domain(db: Session, domain: str):
    return (
        db.query(models.InfoSource)
        .join(models.InfoSourceDomain)
        .filter(models.InfoSourceDomain.domain == domain)
        .first()
    )


def set_info_source_name(db: Session, info_source: models.InfoSource, name: str):
    info_source.name = name
    db.flush()
    db.refresh(info_source)
    return info_source


def create_info_source_reference(
    db: Session,
    *,
    url: str,
    creator_id: uuid.UUID,
    info_channel_id: uuid.UUID,
    info_source_id: uuid.UUID,
    recommendation_id: Optional[uuid.UUID] = None,
    title: Optional[str] = None,
    summary: Optional[str] = None,
):
    db_reference = models.InfoSourceReference(
        url=url,
        creator_id=creator_id,
        info_channel_id=info_channel_id,
        info_source_id=info_source_id,
        recommendation_id=recommendation_id,
        title=title,
        summary=summary,
    )
    db.add(db_reference)
    db.flush()
    db.refresh(db_reference)
    return db_reference


def get_info_source_reference(db: Session, info_source_reference_id: uuid.UUID):
    return (
        db.query(models.InfoSourceReference)
        .filter(models.InfoSourceReference.id == info_source_reference_id)
        .first()
    )


def extend_info_source_reference(db: Session, reference: models.InfoSourceReference, attribute: str, items: Iterable):
    """Append ``items`` to one of the reference's many-to-many collections, skipping duplicates."""
    collection = getattr(reference, attribute)
    for item in items:
        if item not in collection:
            collection.append(item)
    db.flush()
    db.refresh(reference)
    return reference
