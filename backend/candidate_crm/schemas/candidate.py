"""
Candidate schemas for CRUD, search and export filtering
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

from ..models.candidate import JobType, CandidateStatus
from .common import as_utc

OPTIONAL_TEXT_FIELDS = (
    "email", "phone", "wechat", "current_company", "school",
    "linkedin_url", "google_scholar", "resume_url", "resume_filename",
)


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CandidateBase(BaseModel):
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    wechat: Optional[str] = None
    current_company: Optional[str] = None
    school: Optional[str] = None
    linkedin_url: Optional[str] = None
    google_scholar: Optional[str] = None
    resume_url: Optional[str] = None
    resume_filename: Optional[str] = None

    # HTML forms submit "" for untouched inputs
    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_as_null(cls, value):
        return _blank_to_none(value)


class CandidateCreate(CandidateBase):
    name: str = Field(..., min_length=1)
    job_type: JobType
    status: CandidateStatus = CandidateStatus.NEW
    # Optional first note, written in the same unit of work as the candidate
    note: Optional[str] = Field(None, max_length=1000)

    @field_validator("note", mode="before")
    @classmethod
    def blank_note_as_null(cls, value):
        return _blank_to_none(value)


class CandidateUpdate(CandidateBase):
    """Partial patch - only fields present in the request are applied."""
    name: Optional[str] = Field(None, min_length=1)
    job_type: Optional[JobType] = None
    status: Optional[CandidateStatus] = None

    @field_validator("name", "job_type", "status", mode="before")
    @classmethod
    def required_fields_not_null(cls, value):
        if value is None:
            raise ValueError("field is required and cannot be null")
        return value


class CandidateResponse(BaseModel):
    id: str
    user_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    wechat: Optional[str] = None
    job_type: JobType
    current_company: Optional[str] = None
    school: Optional[str] = None
    linkedin_url: Optional[str] = None
    google_scholar: Optional[str] = None
    status: CandidateStatus
    resume_url: Optional[str] = None
    resume_filename: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def timestamps_in_utc(cls, value):
        return as_utc(value)

    class Config:
        from_attributes = True


class CandidateExportFilter(BaseModel):
    """Substring match on text fields, exact match on enums."""
    name: Optional[str] = None
    job_type: Optional[JobType] = None
    current_company: Optional[str] = None
    school: Optional[str] = None
    status: Optional[CandidateStatus] = None
    candidate_ids: Optional[List[str]] = None

    @field_validator("name", "current_company", "school", "job_type", "status", mode="before")
    @classmethod
    def blank_as_null(cls, value):
        return _blank_to_none(value)
