"""
Pydantic schemas used for input validation and read models.
"""

from .changelog import ChangeLogBase, ChangeLogCreate, ChangeLog
from .clients import ClientCreate, DeviceType
from .infosources import InfoSourceCreate

__all__ = [
    "ChangeLogBase",
    "ChangeLogCreate",
    "ChangeLog",
    "ClientCreate",
    "DeviceType",
    "InfoSourceCreate",
]
