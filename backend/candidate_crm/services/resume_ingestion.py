"""
Resume ingestion pipeline: upload -> signed URL -> text -> structured profile.

Runs the four stages in order and stops at the first failure, re-raising
that stage's error unchanged. Nothing is persisted as a candidate here;
the caller reviews the pre-filled form and creates the record itself.
"""
import logging

from ..errors import CRMError, ParseError
from ..schemas.resume import ResumeParseResult
from .pdf_text import extract_text
from .resume_extractor import ResumeExtractor
from .resume_storage import ResumeStorage

logger = logging.getLogger(__name__)


class ResumeIngestionService:

    def __init__(self, storage: ResumeStorage, extractor: ResumeExtractor):
        self.storage = storage
        self.extractor = extractor

    async def ingest(
        self,
        user_id: str,
        filename: str,
        content: bytes,
        content_type: str = "application/pdf",
    ) -> ResumeParseResult:
        path = await self.storage.upload(user_id, filename, content, content_type)

        try:
            resume_url = await self.storage.resolve_url(path)

            # Parse the bytes we already hold rather than fetching the signed URL
            text = extract_text(content, content_type)
            if not text or not text.strip():
                raise ParseError("Failed to parse resume content")
            logger.info(f"Extracted {len(text)} characters from {path}")

            profile = await self.extractor.extract(text)
        except CRMError as e:
            logger.warning(f"Resume ingestion failed after upload of {path}: {e.message}")
            await self._discard(path)
            raise

        return ResumeParseResult(
            profile=profile,
            form=profile.to_candidate_form(resume_url=path, resume_filename=filename),
            resume_url=resume_url,
            resume_path=path,
            file_name=filename,
        )

    async def _discard(self, path: str) -> None:
        """Best-effort removal of an upload whose pipeline failed."""
        try:
            await self.storage.delete(path)
        except CRMError as e:
            logger.error(f"Could not remove orphaned resume {path}: {e.message}")
