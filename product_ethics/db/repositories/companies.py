"""
Company and store repository functions.
"""
from __future__ import annotations

import uuid
from typing import Optional
from sqlalchemy.orm import Session

from product_ethics.db import models


def create_company(db: Session, creator_id: Optional[uuid.UUID] = None):
    db_company = models.Company(creator_id=creator_id)
    db.add(db_company)
    db.flush()
    db.refresh(db_company)
    return db_company


def get_company(db: Session, company_id: uuid.UUID):
    return db.query(models.Company).filter(models.Company.id == company_id).first()


def set_company_name(db: Session, company: models.Company, name: str):
    company.name = name
    db.flush()
    db.refresh(company)
    return company


def create_store(db: Session, creator_id: Optional[uuid.UUID] = None):
    db_store = models.Store(creator_id=creator_id)
    db.add(db_store)
    db.flush()
    db.refresh(db_store)
    return db_store


def get_store(db: Session, store_id: uuid.UUID):
    return db.query(models.Store).filter(models.Store.id == store_id).first()


def set_store_name(db: Session, store: models.Store, name: str):
    store.name = name
    db.flush()
    db.refresh(store)
    return store
