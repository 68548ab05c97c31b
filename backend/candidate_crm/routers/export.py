"""
Export Router - candidate spreadsheets
"""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Response

from ..dependencies import get_candidate_repository
from ..errors import NotFound
from ..repositories import CandidateRepository
from ..schemas.candidate import CandidateExportFilter
from ..services.export import XLSX_MEDIA_TYPE, export_filename, filter_candidates, to_spreadsheet

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/export", tags=["Export"])


def _xlsx_response(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "Content-Length": str(len(content)),
        },
    )


@router.get("")
async def export_candidates(
    date_format: Optional[str] = None,
    candidates: CandidateRepository = Depends(get_candidate_repository),
):
    """All of the caller's candidates as .xlsx."""
    logger.info("Starting export of candidates to Excel")
    rows = await candidates.list()
    content = to_spreadsheet(rows, date_format=date_format)
    return _xlsx_response(content, export_filename())


@router.post("")
async def export_filtered_candidates(
    filters: CandidateExportFilter,
    date_format: Optional[str] = None,
    candidates: CandidateRepository = Depends(get_candidate_repository),
):
    """Candidates matching the filter as .xlsx; an empty match is an error."""
    logger.info(f"Starting export of filtered candidates: {filters.model_dump(exclude_none=True)}")
    selected = filter_candidates(await candidates.list(), filters)
    if not selected:
        logger.warning("No candidates found matching the filter criteria")
        raise NotFound("No candidates found matching the filter criteria")

    content = to_spreadsheet(selected, date_format=date_format)
    return _xlsx_response(content, export_filename(filtered=True))
