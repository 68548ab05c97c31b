"""
Resumes Router - upload + parse, signed URL refresh, removal
"""
import logging
from fastapi import APIRouter, Depends, File, Query, UploadFile

from ..config import Settings, get_settings
from ..dependencies import get_candidate_repository, get_ingestion_service, get_resume_storage
from ..errors import NotFound, ParseError
from ..repositories import CandidateRepository
from ..schemas.common import ActionResponse
from ..schemas.resume import ResumeParseResult, SignedUrlResponse
from ..services.auth import get_current_user_id
from ..services.pdf_text import PDF_CONTENT_TYPE
from ..services.resume_ingestion import ResumeIngestionService
from ..services.resume_storage import ResumeStorage, user_namespace

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/resumes", tags=["Resumes"])


async def _owned_path(path: str, user_id: str, candidates: CandidateRepository) -> str:
    """
    A path is the caller's only if one of their candidates references it.

    The storage namespace is sanitized, so distinct user ids can share a
    prefix; the prefix alone proves nothing. Anything else looks exactly
    like a missing file.
    """
    if not path.startswith(user_namespace(user_id)) or ".." in path:
        raise NotFound("Resume file not found in storage")
    if not await candidates.owns_resume(path):
        raise NotFound("Resume file not found in storage")
    return path


@router.post("/parse", response_model=ActionResponse[ResumeParseResult])
async def parse_resume(
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
    ingestion: ResumeIngestionService = Depends(get_ingestion_service),
    settings: Settings = Depends(get_settings),
):
    """
    Upload a PDF resume and return extracted fields for the create form.

    Does not create a candidate; the user reviews the result first.
    """
    filename = file.filename or "resume.pdf"
    if not filename.lower().endswith(".pdf"):
        raise ParseError("Only PDF files are supported")

    content = await file.read()
    if not content:
        raise ParseError("Uploaded file is empty")
    if len(content) > settings.max_resume_size_bytes:
        raise ParseError(f"File size must be less than {settings.max_resume_size_mb}MB")

    logger.info(f"Parsing resume file: {filename} ({len(content)} bytes) for user {user_id}")
    result = await ingestion.ingest(user_id, filename, content, PDF_CONTENT_TYPE)
    return ActionResponse(message="Resume parsed successfully", data=result)


@router.get("/url", response_model=ActionResponse[SignedUrlResponse])
async def get_resume_url(
    path: str = Query(..., min_length=1),
    user_id: str = Depends(get_current_user_id),
    storage: ResumeStorage = Depends(get_resume_storage),
    candidates: CandidateRepository = Depends(get_candidate_repository),
):
    url = await storage.resolve_url(await _owned_path(path, user_id, candidates))
    return ActionResponse(
        message="Resume URL generated successfully",
        data=SignedUrlResponse(path=path, url=url, expires_in=storage.signed_url_expires_in),
    )


@router.delete("", response_model=ActionResponse[None])
async def delete_resume(
    path: str = Query(..., min_length=1),
    user_id: str = Depends(get_current_user_id),
    storage: ResumeStorage = Depends(get_resume_storage),
    candidates: CandidateRepository = Depends(get_candidate_repository),
):
    await storage.delete(await _owned_path(path, user_id, candidates))
    return ActionResponse(message="Resume deleted successfully")
