"""
Change log repository functions.

Change logs are append-only: only create and query are provided.
"""
from __future__ import annotations

import uuid
from typing import Optional
from sqlalchemy.orm import Session

from product_ethics.db import schemas, models


def create_change_log(db: Session, change_log: schemas.ChangeLogCreate, client_id: uuid.UUID):
    db_change_log = models.ChangeLog(**change_log.model_dump(), client_id=client_id)
    db.add(db_change_log)
    db.flush()
    db.refresh(db_change_log)
    return db_change_log


def get_change_logs(
    db: Session,
    client_id: Optional[uuid.UUID] = None,
    entity_id: Optional[uuid.UUID] = None,
    entity_type: Optional[str] = None,
    change_type: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
):
    query = db.query(models.ChangeLog)
    if client_id:
        query = query.filter(models.ChangeLog.client_id == client_id)
    if entity_id:
        query = query.filter(models.ChangeLog.entity_id == entity_id)
    if entity_type:
        query = query.filter(models.ChangeLog.changed_entity_type == entity_type)
    if change_type:
        query = query.filter(models.ChangeLog.change_type == change_type)
    return query.order_by(models.ChangeLog.created_at.desc()).offset(skip).limit(limit).all()
