import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from .base import Base, now_utc


class ChangeLog(Base):
    """Append-only record of a mutating action performed by a client."""
    __tablename__ = 'change_logs'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(UUID(as_uuid=True), ForeignKey('clients.id'), nullable=False)
    changed_entity_type = Column(String(40), nullable=False, default='unknown')
    entity_id = Column(UUID(as_uuid=True), nullable=True)
    change_type = Column(String(20), nullable=False, default='unknown')
    change_text = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)

    __table_args__ = (
        Index('idx_change_logs_client_id', 'client_id'),
        Index('idx_change_logs_entity_id', 'entity_id'),
        Index('idx_change_logs_created_at', 'created_at'),
    )
