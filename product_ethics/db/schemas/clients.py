from typing import Literal, Optional
from pydantic import BaseModel, model_validator


DeviceType = Literal["android", "ios", "unknown"]


class ClientCreate(BaseModel):
    """Registration input. Username and password come as a pair or not at all."""
    device_type: DeviceType = "unknown"
    username: Optional[str] = None
    password: Optional[str] = None

    @model_validator(mode="after")
    def _credentials_paired(self):
        if (self.username is None) != (self.password is None):
            raise ValueError("Username and password must both be provided or both be omitted")
        if self.username is not None and (not self.username.strip() or not self.password):
            raise ValueError("Username and password must not be empty")
        return self

