from .candidates import router as candidates_router
from .notes import router as notes_router
from .resumes import router as resumes_router
from .export import router as export_router

__all__ = [
    "candidates_router", "notes_router", "resumes_router", "export_router"
]
