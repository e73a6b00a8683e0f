import uuid
from sqlalchemy import Column, String, Text, DateTime, Boolean, Float, ForeignKey, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class Client(Base):
    __tablename__ = 'clients'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String, nullable=True, unique=True)
    password_hashed = Column(Text, nullable=True)
    # sha256(sha256(mobile) + sha256(password)), used for recovery lookups
    mobile_number_hash_password_hash_hashed = Column(String, nullable=True, unique=True)
    role = Column(String, nullable=False, default='user')  # 'user'|'admin'
    verified = Column(Boolean, nullable=False, default=False)
    enabled = Column(Boolean, nullable=False, default=True)
    banned = Column(Boolean, nullable=False, default=False)
    trust_level = Column(Float, nullable=False, default=0.5)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    devices = relationship("ClientDevice", back_populates="client", cascade="all, delete-orphan")
    contributions = relationship("Contribution", back_populates="client")
    trust_votes = relationship("TrustVote", back_populates="client")
    info_channel_memberships = relationship("InfoChannelClient", back_populates="client", cascade="all, delete-orphan")
    followed_info_channels = relationship("InfoChannelFollower", back_populates="client", cascade="all, delete-orphan")
    product_scans = relationship("ProductScan", back_populates="client")

    __table_args__ = (
        CheckConstraint("role in ('user','admin')", name='ck_clients_role'),
    )


class ClientDevice(Base):
    __tablename__ = 'client_devices'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(UUID(as_uuid=True), ForeignKey('clients.id', ondelete='CASCADE'), nullable=False)
    id_hashed = Column(String(64), nullable=False, unique=True)
    type = Column(String(20), nullable=False, default='unknown')  # 'android'|'ios'|'unknown'
    enabled = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    client = relationship("Client", back_populates="devices")

    __table_args__ = (
        Index('idx_client_devices_client_id', 'client_id'),
        CheckConstraint("type in ('android','ios','unknown')", name='ck_client_devices_type'),
    )


class MobileNumber(Base):
    """Hashed mobile number. Intentionally carries no reference to a client."""
    __tablename__ = 'mobile_numbers'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    mobile_number_hash = Column(String(64), nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)


class SmsVerification(Base):
    __tablename__ = 'sms_verifications'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    mobile_number_hash = Column(String(64), nullable=False, unique=True)
    sms_handle = Column(String, nullable=True)
    sms_challenge_hash = Column(String(64), nullable=True)
    client_challenge = Column(String, nullable=True)
    status = Column(String(20), nullable=False, default='unknown')  # unknown|pending|sent|failed|verified
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        CheckConstraint("status in ('unknown','pending','sent','failed','verified')", name='ck_sms_verifications_status'),
    )
