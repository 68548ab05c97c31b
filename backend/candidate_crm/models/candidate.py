"""
Candidate model - a person tracked through the hiring pipeline by one recruiter
"""
import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Text, DateTime, Enum as SQLEnum
from ..database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class JobType(str, enum.Enum):
    SOFTWARE_ENGINEER = "software_engineer"
    DATA_SCIENTIST = "data_scientist"
    PRODUCT_MANAGER = "product_manager"
    DESIGNER = "designer"
    DEVOPS = "devops"
    QA_ENGINEER = "qa_engineer"
    FRONTEND_DEVELOPER = "frontend_developer"
    BACKEND_DEVELOPER = "backend_developer"
    FULLSTACK_DEVELOPER = "fullstack_developer"
    MOBILE_DEVELOPER = "mobile_developer"
    ML_ENGINEER = "ml_engineer"
    OTHER = "other"


class CandidateStatus(str, enum.Enum):
    NEW = "new"
    CONTACTED = "contacted"
    INTERVIEWING = "interviewing"
    OFFERED = "offered"
    HIRED = "hired"
    REJECTED = "rejected"
    ON_HOLD = "on_hold"
    NOT_INTERESTED = "not_interested"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Candidate(Base):
    __tablename__ = "candidates"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(255), nullable=False, index=True)

    name = Column(Text, nullable=False)
    email = Column(Text, nullable=True)
    phone = Column(Text, nullable=True)
    wechat = Column(Text, nullable=True)
    job_type = Column(
        SQLEnum(JobType, name="job_type", values_callable=_enum_values),
        nullable=False,
    )
    current_company = Column(Text, nullable=True)
    school = Column(Text, nullable=True)
    linkedin_url = Column(Text, nullable=True)
    google_scholar = Column(Text, nullable=True)
    status = Column(
        SQLEnum(CandidateStatus, name="status", values_callable=_enum_values),
        default=CandidateStatus.NEW,
        nullable=False,
    )

    # Storage path of the uploaded resume, not a resolvable URL
    resume_url = Column(Text, nullable=True)
    resume_filename = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
