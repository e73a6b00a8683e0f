import uuid
from sqlalchemy import Column, String, DateTime, Float, ForeignKey, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class Product(Base):
    __tablename__ = 'products'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    barcode = Column(String, nullable=True, unique=True)
    barcode_type = Column(String(20), nullable=False, default='unknown')  # 'ean13'|'upc'|'unknown'
    # Mirrors the enabled name contribution
    name = Column(String, nullable=True)
    creator_id = Column(UUID(as_uuid=True), ForeignKey('clients.id'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    scans = relationship("ProductScan", back_populates="product")

    __table_args__ = (
        CheckConstraint("barcode_type in ('ean13','upc','unknown')", name='ck_products_barcode_type'),
    )


class ProductCategory(Base):
    __tablename__ = 'product_categories'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=True)
    creator_id = Column(UUID(as_uuid=True), ForeignKey('clients.id'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class ProductLabel(Base):
    __tablename__ = 'product_labels'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=True)
    creator_id = Column(UUID(as_uuid=True), ForeignKey('clients.id'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class ProductTag(Base):
    __tablename__ = 'product_tags'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, unique=True)
    creator_id = Column(UUID(as_uuid=True), ForeignKey('clients.id'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class Location(Base):
    __tablename__ = 'locations'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)


class ProductScan(Base):
    __tablename__ = 'product_scans'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(UUID(as_uuid=True), ForeignKey('clients.id'), nullable=False)
    product_id = Column(UUID(as_uuid=True), ForeignKey('products.id'), nullable=False)
    location_id = Column(UUID(as_uuid=True), ForeignKey('locations.id'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    client = relationship("Client", back_populates="product_scans")
    product = relationship("Product", back_populates="scans")
    location = relationship("Location")

    __table_args__ = (
        Index('idx_product_scans_client_id', 'client_id'),
        Index('idx_product_scans_product_id', 'product_id'),
    )
