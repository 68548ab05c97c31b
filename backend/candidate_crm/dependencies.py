"""
Request-scoped providers for repositories and the service handles built in
the application lifespan.
"""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from .database import get_db
from .repositories import CandidateRepository, NoteRepository
from .services.auth import get_current_user_id
from .services.resume_extractor import ResumeExtractor
from .services.resume_ingestion import ResumeIngestionService
from .services.resume_storage import ResumeStorage


def get_resume_storage(request: Request) -> ResumeStorage:
    return request.app.state.resume_storage


def get_resume_extractor(request: Request) -> ResumeExtractor:
    return request.app.state.resume_extractor


def get_ingestion_service(
    storage: ResumeStorage = Depends(get_resume_storage),
    extractor: ResumeExtractor = Depends(get_resume_extractor),
) -> ResumeIngestionService:
    return ResumeIngestionService(storage, extractor)


def get_candidate_repository(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> CandidateRepository:
    return CandidateRepository(db, user_id)


def get_note_repository(
    db: AsyncSession = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
) -> NoteRepository:
    return NoteRepository(db, user_id)
