"""
Product repository functions.

Implements CRUD for products, categories, labels, tags, locations and scans.
"""
from __future__ import annotations

import uuid
from typing import Iterable, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from product_ethics.db import models


def create_product(
    db: Session,
    *,
    creator_id: Optional[uuid.UUID] = None,
    barcode: Optional[str] = None,
    barcode_type: str = 'unknown',
):
    db_product = models.Product(creator_id=creator_id, barcode=barcode, barcode_type=barcode_type)
    db.add(db_product)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        raise ValueError(f"Product with barcode {barcode} already exists") from e
    db.refresh(db_product)
    return db_product


def get_product(db: Session, product_id: uuid.UUID):
    return db.query(models.Product).filter(models.Product.id == product_id).first()


def get_product_by_barcode(db: Session, barcode: str):
    return db.query(models.Product).filter(models.Product.barcode == barcode).first()


def update_product(db: Session, product: models.Product, **fields):
    for key, value in fields.items():
        setattr(product, key, value)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        raise ValueError(f"Could not update product {product.id}: {e.orig}") from e
    db.refresh(product)
    return product


def create_product_category(db: Session, creator_id: Optional[uuid.UUID] = None):
    db_category = models.ProductCategory(creator_id=creator_id)
    db.add(db_category)
    db.flush()
    db.refresh(db_category)
    return db_category


def get_product_category(db: Session, product_category_id: uuid.UUID):
    return db.query(models.ProductCategory).filter(models.ProductCategory.id == product_category_id).first()


def get_product_categories(db: Session, product_category_ids: Iterable[uuid.UUID]):
    ids = list(product_category_ids)
    if not ids:
        return []
    return db.query(models.ProductCategory).filter(models.ProductCategory.id.in_(ids)).all()


def set_product_category_name(db: Session, category: models.ProductCategory, name: str):
    category.name = name
    db.flush()
    db.refresh(category)
    return category


def create_product_label(db: Session, creator_id: Optional[uuid.UUID] = None):
    db_label = models.ProductLabel(creator_id=creator_id)
    db.add(db_label)
    db.flush()
    db.refresh(db_label)
    return db_label


def get_product_label(db: Session, product_label_id: uuid.UUID):
    return db.query(models.ProductLabel).filter(models.ProductLabel.id == product_label_id).first()


def get_product_labels(db: Session, product_label_ids: Iterable[uuid.UUID]):
    ids = list(product_label_ids)
    if not ids:
        return []
    return db.query(models.ProductLabel).filter(models.ProductLabel.id.in_(ids)).all()


def set_product_label_name(db: Session, label: models.ProductLabel, name: str):
    label.name = name
    db.flush()
    db.refresh(label)
    return label


def create_product_tag(db: Session, name: str, creator_id: Optional[uuid.UUID] = None):
    db_tag = models.ProductTag(name=name, creator_id=creator_id)
    db.add(db_tag)
    try:
        db.flush()
    except IntegrityError as e:
        db.rollback()
        raise ValueError(f"Product tag '{name}' already exists") from e
    db.refresh(db_tag)
    return db_tag


def get_product_tag(db: Session, product_tag_id: uuid.UUID):
    return db.query(models.ProductTag).filter(models.ProductTag.id == product_tag_id).first()


def get_product_tag_by_name(db: Session, name: str):
    return db.query(models.ProductTag).filter(models.ProductTag.name == name).first()


def get_product_tags(db: Session, product_tag_ids: Iterable[uuid.UUID]):
    ids = list(product_tag_ids)
    if not ids:
        return []
    return db.query(models.ProductTag).filter(models.ProductTag.id.in_(ids)).all()


def create_location(db: Session, latitude: float, longitude: float, name: Optional[str] = None):
    db_location = models.Location(latitude=latitude, longitude=longitude, name=name)
    db.add(db_location)
    db.flush()
    db.refresh(db_location)
    return db_location


def create_product_scan(
    db: Session,
    client_id: uuid.UUID,
    product_id: uuid.UUID,
    location_id: Optional[uuid.UUID] = None,
):
    db_scan = models.ProductScan(client_id=client_id, product_id=product_id, location_id=location_id)
    db.add(db_scan)
    db.flush()
    db.refresh(db_scan)
    return db_scan


def get_product_scan(db: Session, product_scan_id: uuid.UUID):
    return db.query(models.ProductScan).filter(models.ProductScan.id == product_scan_id).first()


def set_product_scan_location(db: Session, scan: models.ProductScan, location_id: uuid.UUID):
    scan.location_id = location_id
    db.flush()
    db.refresh(scan)
    return scan
