"""
Candidate Repository
Owner-scoped create/read/search/update/delete over the candidates table
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..errors import NotFound, OperationFailed, Unauthorized
from ..models import Candidate, Note
from ..models.candidate import utcnow

logger = logging.getLogger(__name__)


class CandidateRepository:
    """
    Data access for candidates owned by a single user.

    Every query carries ``user_id`` so a record owned by someone else is
    indistinguishable from one that does not exist. Writes are flushed,
    not committed: the request's session commits once per unit of work.
    """

    def __init__(self, db: AsyncSession, user_id: Optional[str]):
        """
        Args:
            db: async database session
            user_id: opaque id of the calling user
        """
        if not user_id:
            raise Unauthorized()
        self.db = db
        self.user_id = user_id

    async def create(self, data: Dict[str, Any]) -> Candidate:
        """
        Insert a candidate owned by the caller.

        Args:
            data: candidate fields; ``id``, ``user_id`` and timestamps are
                assigned here and ignored if present

        Returns:
            The created Candidate
        """
        values = {
            key: value for key, value in data.items()
            if key not in ("id", "user_id", "created_at", "updated_at")
        }
        candidate = Candidate(**values, user_id=self.user_id)
        try:
            self.db.add(candidate)
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.exception(f"Error creating candidate for user {self.user_id}: {e}")
            raise OperationFailed("Failed to create candidate")
        return candidate

    async def get_by_id(self, candidate_id: str) -> Candidate:
        """
        Raises:
            NotFound: no candidate with this id is owned by the caller
        """
        candidate = await self._find_owned(candidate_id)
        if candidate is None:
            raise NotFound("Candidate not found")
        return candidate

    async def list(self) -> List[Candidate]:
        """All owned candidates, newest first."""
        try:
            result = await self.db.execute(
                select(Candidate)
                .where(Candidate.user_id == self.user_id)
                .order_by(Candidate.created_at.desc())
            )
        except SQLAlchemyError as e:
            logger.exception(f"Error listing candidates for user {self.user_id}: {e}")
            raise OperationFailed("Failed to get candidates")
        return list(result.scalars().all())

    async def search(self, query: str) -> List[Candidate]:
        """
        Owned candidates whose name, email, current company or school
        contains ``query`` (case-insensitive), ordered by name.

        An empty query matches everything; callers route it to ``list()``.
        """
        try:
            result = await self.db.execute(
                select(Candidate)
                .where(
                    Candidate.user_id == self.user_id,
                    or_(
                        Candidate.name.icontains(query, autoescape=True),
                        Candidate.email.icontains(query, autoescape=True),
                        Candidate.current_company.icontains(query, autoescape=True),
                        Candidate.school.icontains(query, autoescape=True),
                    ),
                )
                .order_by(Candidate.name.asc())
            )
        except SQLAlchemyError as e:
            logger.exception(f"Error searching candidates for user {self.user_id}: {e}")
            raise OperationFailed("Failed to search candidates")
        return list(result.scalars().all())

    async def update(self, candidate_id: str, data: Dict[str, Any]) -> Candidate:
        """
        Apply a partial patch to an owned candidate.

        Ownership is checked with a read before the write. The two steps are
        not atomic, which is safe only while ownership never changes after
        creation.

        Raises:
            NotFound: the candidate is absent or owned by another user
        """
        candidate = await self.get_by_id(candidate_id)

        for key, value in data.items():
            if key in ("id", "user_id", "created_at", "updated_at"):
                continue
            setattr(candidate, key, value)
        candidate.updated_at = utcnow()

        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.exception(f"Error updating candidate {candidate_id}: {e}")
            raise OperationFailed("Failed to update candidate")
        return candidate

    async def delete(self, candidate_id: str) -> None:
        """
        Remove an owned candidate together with all of its notes.

        Raises:
            NotFound: the candidate is absent or owned by another user
        """
        candidate = await self.get_by_id(candidate_id)

        try:
            # Cascade explicitly; SQLite only honours ON DELETE with a pragma
            await self.db.execute(delete(Note).where(Note.candidate_id == candidate.id))
            await self.db.execute(
                delete(Candidate).where(
                    Candidate.id == candidate.id,
                    Candidate.user_id == self.user_id,
                )
            )
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.exception(f"Error deleting candidate {candidate_id}: {e}")
            raise OperationFailed("Failed to delete candidate")

    async def owns_resume(self, path: str) -> bool:
        """True when one of the caller's candidates references ``path`` as its resume."""
        try:
            found = await self.db.scalar(
                select(Candidate.id)
                .where(
                    Candidate.user_id == self.user_id,
                    Candidate.resume_url == path,
                )
                .limit(1)
            )
        except SQLAlchemyError as e:
            logger.exception(f"Error checking resume ownership for user {self.user_id}: {e}")
            raise OperationFailed("Failed to get resume")
        return found is not None

    async def _find_owned(self, candidate_id: str) -> Optional[Candidate]:
        try:
            result = await self.db.execute(
                select(Candidate).where(
                    Candidate.id == candidate_id,
                    Candidate.user_id == self.user_id,
                )
            )
        except SQLAlchemyError as e:
            logger.exception(f"Error getting candidate {candidate_id}: {e}")
            raise OperationFailed("Failed to get candidate")
        return result.scalar_one_or_none()
