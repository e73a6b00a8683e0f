import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index, Table
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc


info_source_reference_products = Table(
    'info_source_reference_products',
    Base.metadata,
    Column('info_source_reference_id', UUID(as_uuid=True), ForeignKey('info_source_references.id', ondelete='CASCADE'), primary_key=True),
    Column('product_id', UUID(as_uuid=True), ForeignKey('products.id', ondelete='CASCADE'), primary_key=True),
)

info_source_reference_product_categories = Table(
    'info_source_reference_product_categories',
    Base.metadata,
    Column('info_source_reference_id', UUID(as_uuid=True), ForeignKey('info_source_references.id', ondelete='CASCADE'), primary_key=True),
    Column('product_category_id', UUID(as_uuid=True), ForeignKey('product_categories.id', ondelete='CASCADE'), primary_key=True),
)

info_source_reference_product_labels = Table(
    'info_source_reference_product_labels',
    Base.metadata,
    Column('info_source_reference_id', UUID(as_uuid=True), ForeignKey('info_source_references.id', ondelete='CASCADE'), primary_key=True),
    Column('product_label_id', UUID(as_uuid=True), ForeignKey('product_labels.id', ondelete='CASCADE'), primary_key=True),
)

info_source_reference_companies = Table(
    'info_source_reference_companies',
    Base.metadata,
    Column('info_source_reference_id', UUID(as_uuid=True), ForeignKey('info_source_references.id', ondelete='CASCADE'), primary_key=True),
    Column('company_id', UUID(as_uuid=True), ForeignKey('companies.id', ondelete='CASCADE'), primary_key=True),
)


class InfoSource(Base):
    __tablename__ = 'info_sources'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=True)
    creator_id = Column(UUID(as_uuid=True), ForeignKey('clients.id'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    domains = relationship("InfoSourceDomain", back_populates="info_source", cascade="all, delete-orphan")
    references = relationship("InfoSourceReference", back_populates="info_source")

    @property
    def domain_names(self):
        return [d.domain for d in self.domains]


class InfoSourceDomain(Base):
    __tablename__ = 'info_source_domains'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    info_source_id = Column(UUID(as_uuid=True), ForeignKey('info_sources.id', ondelete='CASCADE'), nullable=False)
    domain = Column(String, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    info_source = relationship("InfoSource", back_populates="domains")


class InfoSourceReference(Base):
    __tablename__ = 'info_source_references'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    url = Column(Text, nullable=False)
    title = Column(String, nullable=True)
    summary = Column(Text, nullable=True)
    creator_id = Column(UUID(as_uuid=True), ForeignKey('clients.id'), nullable=False)
    info_channel_id = Column(UUID(as_uuid=True), ForeignKey('info_channels.id'), nullable=False)
    info_source_id = Column(UUID(as_uuid=True), ForeignKey('info_sources.id'), nullable=False)
    recommendation_id = Column(UUID(as_uuid=True), ForeignKey('recommendations.id', ondelete='CASCADE'), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    info_source = relationship("InfoSource", back_populates="references")
    info_channel = relationship("InfoChannel")
    recommendation = relationship("Recommendation", back_populates="info_source_references")
    products = relationship("Product", secondary=info_source_reference_products)
    product_categories = relationship("ProductCategory", secondary=info_source_reference_product_categories)
    product_labels = relationship("ProductLabel", secondary=info_source_reference_product_labels)
    companies = relationship("Company", secondary=info_source_reference_companies)

    __table_args__ = (
        Index('idx_info_source_references_info_channel_id', 'info_channel_id'),
        Index('idx_info_source_references_recommendation_id', 'recommendation_id'),
    )
