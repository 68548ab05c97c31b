"""
Note schemas
"""
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from .common import as_utc

NOTE_MAX_LENGTH = 1000


class NoteCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=NOTE_MAX_LENGTH)


class NoteUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=NOTE_MAX_LENGTH)


class NoteResponse(BaseModel):
    id: str
    user_id: str
    candidate_id: str
    content: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def timestamps_in_utc(cls, value):
        return as_utc(value)

    class Config:
        from_attributes = True
