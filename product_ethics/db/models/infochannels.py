import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Index, CheckConstraint, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class InfoChannel(Base):
    __tablename__ = 'info_channels'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    members = relationship("InfoChannelClient", back_populates="info_channel", cascade="all, delete-orphan")
    followers = relationship("InfoChannelFollower", back_populates="info_channel", cascade="all, delete-orphan")
    recommendations = relationship("Recommendation", back_populates="info_channel")


class InfoChannelClient(Base):
    """Membership of a client in an info channel."""
    __tablename__ = 'info_channel_clients'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    info_channel_id = Column(UUID(as_uuid=True), ForeignKey('info_channels.id', ondelete='CASCADE'), nullable=False)
    client_id = Column(UUID(as_uuid=True), ForeignKey('clients.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    info_channel = relationship("InfoChannel", back_populates="members")
    client = relationship("Client", back_populates="info_channel_memberships")
    roles = relationship("InfoChannelRole", back_populates="membership", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint('info_channel_id', 'client_id', name='uq_info_channel_clients_channel_client'),
        Index('idx_info_channel_clients_client_id', 'client_id'),
    )


class InfoChannelRole(Base):
    __tablename__ = 'info_channel_roles'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    info_channel_client_id = Column(UUID(as_uuid=True), ForeignKey('info_channel_clients.id', ondelete='CASCADE'), nullable=False)
    role = Column(String(20), nullable=False)  # 'owner'|'admin'|'editor'|'viewer'
    created_at = Column(DateTime(timezone=True), default=now_utc)

    membership = relationship("InfoChannelClient", back_populates="roles")

    __table_args__ = (
        UniqueConstraint('info_channel_client_id', 'role', name='uq_info_channel_roles_membership_role'),
        CheckConstraint("role in ('owner','admin','editor','viewer')", name='ck_info_channel_roles_role'),
    )


class InfoChannelFollower(Base):
    __tablename__ = 'info_channel_followers'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    info_channel_id = Column(UUID(as_uuid=True), ForeignKey('info_channels.id', ondelete='CASCADE'), nullable=False)
    client_id = Column(UUID(as_uuid=True), ForeignKey('clients.id', ondelete='CASCADE'), nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    info_channel = relationship("InfoChannel", back_populates="followers")
    client = relationship("Client", back_populates="followed_info_channels")

    __table_args__ = (
        UniqueConstraint('info_channel_id', 'client_id', name='uq_info_channel_followers_channel_client'),
        Index('idx_info_channel_followers_client_id', 'client_id'),
    )
