"""
Response envelope shared by every endpoint
"""
from datetime import datetime, timezone
from typing import Generic, Optional, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


def as_utc(value):
    """SQLite hands timestamps back without tzinfo; they were written as UTC."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ActionResponse(BaseModel, Generic[T]):
    is_success: bool = True
    message: str
    data: Optional[T] = None
