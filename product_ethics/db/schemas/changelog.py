import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class ChangeLogBase(BaseModel):
    changed_entity_type: str = "unknown"
    entity_id: Optional[uuid.UUID] = None
    change_type: str = "unknown"
    change_text: Optional[str] = None


class ChangeLogCreate(ChangeLogBase):
    pass


class ChangeLog(ChangeLogBase):
    id: uuid.UUID
    client_id: uuid.UUID
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)
