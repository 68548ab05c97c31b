"""
Resume extraction schemas - transient, used only to pre-fill a new candidate
"""
from typing import List, Optional
from pydantic import BaseModel, Field

from ..models.candidate import JobType, CandidateStatus


class ExperienceEntry(BaseModel):
    company: str
    position: str
    start_date: str
    end_date: str
    description: str


class ExtractedResumeProfile(BaseModel):
    """Structured profile returned by the extraction service"""
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    wechat: Optional[str] = None
    current_company: Optional[str] = None
    linkedin_url: Optional[str] = None
    google_scholar: Optional[str] = None
    school: Optional[str] = None
    job_type: JobType = JobType.OTHER
    experience: Optional[List[ExperienceEntry]] = None
    education: Optional[List[str]] = None
    skills: Optional[List[str]] = None

    def to_candidate_form(
        self,
        resume_url: Optional[str] = None,
        resume_filename: Optional[str] = None,
    ) -> "CandidateFormPrefill":
        return CandidateFormPrefill(
            name=self.name,
            email=self.email,
            phone=self.phone,
            wechat=self.wechat,
            current_company=self.current_company,
            linkedin_url=self.linkedin_url,
            google_scholar=self.google_scholar,
            school=self.school,
            job_type=self.job_type,
            status=CandidateStatus.NEW,
            resume_url=resume_url,
            resume_filename=resume_filename,
        )


class CandidateFormPrefill(BaseModel):
    """Values for the create-candidate form; reviewed by the user before submit."""
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    wechat: Optional[str] = None
    current_company: Optional[str] = None
    linkedin_url: Optional[str] = None
    google_scholar: Optional[str] = None
    school: Optional[str] = None
    job_type: JobType = JobType.OTHER
    status: CandidateStatus = CandidateStatus.NEW
    resume_url: Optional[str] = None
    resume_filename: Optional[str] = None


class ResumeParseResult(BaseModel):
    profile: ExtractedResumeProfile
    form: CandidateFormPrefill
    resume_url: str = Field(..., description="Signed URL for viewing the uploaded resume")
    resume_path: str = Field(..., description="Storage path of the uploaded resume")
    file_name: str


class SignedUrlResponse(BaseModel):
    path: str
    url: str
    expires_in: int
