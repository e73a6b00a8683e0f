import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index, CheckConstraint, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class Recommendation(Base):
    __tablename__ = 'recommendations'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    summary = Column(Text, nullable=True)
    score = Column(String(20), nullable=False)  # 'thumbs_up'|'neutral'|'thumbs_down'
    creator_id = Column(UUID(as_uuid=True), ForeignKey('clients.id'), nullable=False)
    info_channel_id = Column(UUID(as_uuid=True), ForeignKey('info_channels.id'), nullable=False)
    subject_type = Column(String(30), nullable=False)
    subject_id = Column(UUID(as_uuid=True), nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    creator = relationship("Client")
    info_channel = relationship("InfoChannel", back_populates="recommendations")
    info_source_references = relationship("InfoSourceReference", back_populates="recommendation", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('info_channel_id', 'subject_type', 'subject_id', name='uq_recommendations_channel_subject'),
        Index('idx_recommendations_subject', 'subject_type', 'subject_id'),
        CheckConstraint("score in ('thumbs_up','neutral','thumbs_down')", name='ck_recommendations_score'),
        CheckConstraint(
            "subject_type in ('product','product_category','product_label','product_tag','company')",
            name='ck_recommendations_subject_type',
        ),
    )
