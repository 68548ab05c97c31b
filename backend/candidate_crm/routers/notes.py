"""
Notes Router - edit and remove individual notes
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..database import get_db
from ..dependencies import get_note_repository
from ..repositories import NoteRepository
from ..schemas.common import ActionResponse
from ..schemas.note import NoteUpdate, NoteResponse

router = APIRouter(prefix="/api/notes", tags=["Notes"])


@router.patch("/{note_id}", response_model=ActionResponse[NoteResponse])
async def update_note(
    note_id: str,
    data: NoteUpdate,
    db: AsyncSession = Depends(get_db),
    notes: NoteRepository = Depends(get_note_repository),
):
    note = await notes.update(note_id, data.content)
    await db.commit()
    return ActionResponse(
        message="Note updated successfully",
        data=NoteResponse.model_validate(note),
    )


@router.delete("/{note_id}", response_model=ActionResponse[None])
async def delete_note(
    note_id: str,
    db: AsyncSession = Depends(get_db),
    notes: NoteRepository = Depends(get_note_repository),
):
    await notes.delete(note_id)
    await db.commit()
    return ActionResponse(message="Note deleted successfully")
