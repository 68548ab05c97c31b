from .candidate import Candidate, JobType, CandidateStatus
from .note import Note

__all__ = [
    "Candidate", "JobType", "CandidateStatus",
    "Note",
]
