"""
Candidates Router - CRUD, search and per-candidate notes
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..dependencies import get_candidate_repository, get_note_repository
from ..models import JobType, CandidateStatus
from ..repositories import CandidateRepository, NoteRepository
from ..schemas.candidate import CandidateCreate, CandidateUpdate, CandidateResponse
from ..schemas.common import ActionResponse
from ..schemas.note import NoteCreate, NoteResponse

router = APIRouter(prefix="/api/candidates", tags=["Candidates"])


# ============================================================================
# Candidate Endpoints
# ============================================================================

@router.post("", response_model=ActionResponse[CandidateResponse], status_code=status.HTTP_201_CREATED)
async def create_candidate(
    data: CandidateCreate,
    db: AsyncSession = Depends(get_db),
    candidates: CandidateRepository = Depends(get_candidate_repository),
    notes: NoteRepository = Depends(get_note_repository),
):
    """
    Create a candidate, optionally with a first note.

    Both rows are written in the request's single transaction, so a failed
    note leaves no orphaned candidate behind.
    """
    candidate = await candidates.create(data.model_dump(exclude={"note"}))
    if data.note:
        await notes.create(candidate.id, data.note)
    await db.commit()

    return ActionResponse(
        message="Candidate created successfully",
        data=CandidateResponse.model_validate(candidate),
    )


@router.get("", response_model=ActionResponse[List[CandidateResponse]])
async def list_candidates(
    q: Optional[str] = None,
    status_filter: Optional[CandidateStatus] = Query(None, alias="status"),
    job_type: Optional[JobType] = None,
    candidates: CandidateRepository = Depends(get_candidate_repository),
):
    """List owned candidates (newest first), or search name, email, company and school when ``q`` is given."""
    if q and q.strip():
        results = await candidates.search(q.strip())
        message = "Candidates search successful"
    else:
        results = await candidates.list()
        message = "Candidates retrieved successfully"

    if status_filter is not None:
        results = [c for c in results if c.status == status_filter]
    if job_type is not None:
        results = [c for c in results if c.job_type == job_type]

    return ActionResponse(
        message=message,
        data=[CandidateResponse.model_validate(c) for c in results],
    )


@router.get("/{candidate_id}", response_model=ActionResponse[CandidateResponse])
async def get_candidate(
    candidate_id: str,
    candidates: CandidateRepository = Depends(get_candidate_repository),
):
    candidate = await candidates.get_by_id(candidate_id)
    return ActionResponse(
        message="Candidate retrieved successfully",
        data=CandidateResponse.model_validate(candidate),
    )


@router.patch("/{candidate_id}", response_model=ActionResponse[CandidateResponse])
async def update_candidate(
    candidate_id: str,
    data: CandidateUpdate,
    db: AsyncSession = Depends(get_db),
    candidates: CandidateRepository = Depends(get_candidate_repository),
):
    candidate = await candidates.update(candidate_id, data.model_dump(exclude_unset=True))
    await db.commit()
    return ActionResponse(
        message="Candidate updated successfully",
        data=CandidateResponse.model_validate(candidate),
    )


@router.delete("/{candidate_id}", response_model=ActionResponse[None])
async def delete_candidate(
    candidate_id: str,
    db: AsyncSession = Depends(get_db),
    candidates: CandidateRepository = Depends(get_candidate_repository),
):
    await candidates.delete(candidate_id)
    await db.commit()
    return ActionResponse(message="Candidate deleted successfully")


# ============================================================================
# Notes on a Candidate
# ============================================================================

@router.get("/{candidate_id}/notes", response_model=ActionResponse[List[NoteResponse]])
async def list_candidate_notes(
    candidate_id: str,
    notes: NoteRepository = Depends(get_note_repository),
):
    results = await notes.list_by_candidate(candidate_id)
    return ActionResponse(
        message="Notes retrieved successfully",
        data=[NoteResponse.model_validate(n) for n in results],
    )


@router.post(
    "/{candidate_id}/notes",
    response_model=ActionResponse[NoteResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_candidate_note(
    candidate_id: str,
    data: NoteCreate,
    db: AsyncSession = Depends(get_db),
    notes: NoteRepository = Depends(get_note_repository),
):
    note = await notes.create(candidate_id, data.content)
    await db.commit()
    return ActionResponse(
        message="Note created successfully",
        data=NoteResponse.model_validate(note),
    )
