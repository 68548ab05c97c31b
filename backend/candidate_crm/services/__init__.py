from .auth import get_current_user_id, decode_user_id
from .export import to_spreadsheet, filter_candidates, export_filename, XLSX_MEDIA_TYPE
from .pdf_text import extract_text
from .resume_extractor import ResumeExtractor, create_genai_client
from .resume_ingestion import ResumeIngestionService
from .resume_storage import ResumeStorage, build_resume_path, sanitize, user_namespace

__all__ = [
    # Auth
    "get_current_user_id",
    "decode_user_id",
    # Export
    "to_spreadsheet",
    "filter_candidates",
    "export_filename",
    "XLSX_MEDIA_TYPE",
    # Resume pipeline
    "extract_text",
    "ResumeExtractor",
    "create_genai_client",
    "ResumeIngestionService",
    "ResumeStorage",
    "build_resume_path",
    "sanitize",
    "user_namespace",
]
