import uuid
from sqlalchemy import Column, String, Text, DateTime, Boolean, Float, ForeignKey, Index, CheckConstraint, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class Contribution(Base):
    """A client edit or assignment on a subject entity.

    Text contributions carry ``text`` (e.g. a new name); reference contributions
    carry ``reference_id`` (e.g. the category assigned to a product). Only one
    text contribution per (type, subject) is enabled at a time.
    """
    __tablename__ = 'contributions'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(UUID(as_uuid=True), ForeignKey('clients.id'), nullable=False)
    type = Column(String(50), nullable=False)
    subject_id = Column(UUID(as_uuid=True), nullable=False)
    text = Column(Text, nullable=True)
    reference_id = Column(UUID(as_uuid=True), nullable=True)
    enabled = Column(Boolean, nullable=False, default=True)
    trust_score = Column(Float, nullable=False, default=0.0)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    client = relationship("Client", back_populates="contributions")
    trust_votes = relationship("TrustVote", back_populates="contribution", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_contributions_type_subject_enabled', 'type', 'subject_id', 'enabled'),
        Index('idx_contributions_client_id', 'client_id'),
        Index('idx_contributions_reference_id', 'reference_id'),
    )


class TrustVote(Base):
    __tablename__ = 'trust_votes'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(UUID(as_uuid=True), ForeignKey('clients.id'), nullable=False)
    contribution_id = Column(UUID(as_uuid=True), ForeignKey('contributions.id', ondelete='CASCADE'), nullable=False)
    vote = Column(String(20), nullable=False)  # 'trusted'|'not_trusted'
    created_at = Column(DateTime(timezone=True), default=now_utc)

    client = relationship("Client", back_populates="trust_votes")
    contribution = relationship("Contribution", back_populates="trust_votes")

    __table_args__ = (
        UniqueConstraint('client_id', 'contribution_id', name='uq_trust_votes_client_contribution'),
        CheckConstraint("vote in ('trusted','not_trusted')", name='ck_trust_votes_vote'),
    )
