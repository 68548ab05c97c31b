from .candidate_repository import CandidateRepository
from .note_repository import NoteRepository

__all__ = ["CandidateRepository", "NoteRepository"]
