"""
Note Repository
Owner-scoped CRUD over notes attached to candidates
"""
import logging
from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFound, NotFoundOrUnauthorized, OperationFailed, Unauthorized
from ..models import Candidate, Note
from ..models.candidate import utcnow

logger = logging.getLogger(__name__)


class NoteRepository:
    """Data access for notes owned by a single user."""

    def __init__(self, db: AsyncSession, user_id: Optional[str]):
        if not user_id:
            raise Unauthorized()
        self.db = db
        self.user_id = user_id

    async def create(self, candidate_id: str, content: str) -> Note:
        """
        Attach a note to one of the caller's candidates.

        Raises:
            NotFound: the candidate is absent or owned by another user
        """
        try:
            owned = await self.db.scalar(
                select(Candidate.id).where(
                    Candidate.id == candidate_id,
                    Candidate.user_id == self.user_id,
                )
            )
        except SQLAlchemyError as e:
            logger.exception(f"Error checking candidate {candidate_id} before note create: {e}")
            raise OperationFailed("Failed to create note")
        if owned is None:
            raise NotFound("Candidate not found")

        note = Note(candidate_id=candidate_id, content=content, user_id=self.user_id)
        try:
            self.db.add(note)
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.exception(f"Error creating note for candidate {candidate_id}: {e}")
            raise OperationFailed("Failed to create note")
        return note

    async def list_by_candidate(self, candidate_id: str) -> List[Note]:
        """Owned notes for a candidate, newest first."""
        try:
            result = await self.db.execute(
                select(Note)
                .where(
                    Note.user_id == self.user_id,
                    Note.candidate_id == candidate_id,
                )
                .order_by(Note.created_at.desc())
            )
        except SQLAlchemyError as e:
            logger.exception(f"Error retrieving notes for candidate {candidate_id}: {e}")
            raise OperationFailed("Failed to retrieve notes")
        return list(result.scalars().all())

    async def update(self, note_id: str, content: str) -> Note:
        """
        Replace a note's content with one conditional UPDATE on id and owner.

        Raises:
            NotFoundOrUnauthorized: no row matched
        """
        try:
            result = await self.db.execute(
                update(Note)
                .where(Note.id == note_id, Note.user_id == self.user_id)
                .values(content=content, updated_at=utcnow())
                .returning(Note)
                .execution_options(populate_existing=True)
            )
            note = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.exception(f"Error updating note {note_id}: {e}")
            raise OperationFailed("Failed to update note")

        if note is None:
            raise NotFoundOrUnauthorized("Note not found or not authorized")
        return note

    async def delete(self, note_id: str) -> None:
        """
        Delete a note matching id and owner.

        Raises:
            NotFoundOrUnauthorized: no row matched
        """
        try:
            result = await self.db.execute(
                delete(Note).where(Note.id == note_id, Note.user_id == self.user_id)
            )
        except SQLAlchemyError as e:
            logger.exception(f"Error deleting note {note_id}: {e}")
            raise OperationFailed("Failed to delete note")

        if result.rowcount == 0:
            raise NotFoundOrUnauthorized("Note not found or not authorized")
