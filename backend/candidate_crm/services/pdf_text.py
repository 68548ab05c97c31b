"""
PDF text extraction using PyMuPDF (no poppler dependency).

Two tiers: the document's own plain-text rendering first, then a walk over
every page's span tree rebuilding each span from its glyphs. Some PDFs
render to an empty string yet still carry a usable span tree.
"""
import logging
from typing import List, Optional

import fitz  # PyMuPDF

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
_TEXT_BLOCK = 0


def _flattened_text(doc: fitz.Document) -> str:
    return "".join(page.get_text("text") for page in doc)


def _span_text(span: dict) -> str:
    chars = span.get("chars")
    if chars is not None:
        return "".join(ch.get("c", "") for ch in chars)
    return span.get("text", "")


def page_runs(page: fitz.Page) -> List[str]:
    """Text of every span on a page, in reading order."""
    runs = []
    tree = page.get_text("rawdict")
    for block in tree.get("blocks", []):
        if block.get("type") != _TEXT_BLOCK:
            continue
        for line in block.get("lines", []):
            for span in line.get("spans", []):
                text = _span_text(span)
                if text:
                    runs.append(text)
    return runs


def join_runs(pages: List[List[str]]) -> str:
    """Space between runs, blank line between pages."""
    extracted = ""
    for runs in pages:
        for text in runs:
            extracted += text + " "
        extracted += "\n\n"
    return extracted.strip()


def _traverse(doc: fitz.Document) -> str:
    pages = []
    for index, page in enumerate(doc):
        runs = page_runs(page)
        logger.debug(f"Page {index + 1} has {len(runs)} text runs")
        pages.append(runs)
    return join_runs(pages)


def extract_text(data: bytes, content_type: Optional[str] = PDF_CONTENT_TYPE) -> Optional[str]:
    """
    Extract plain text from PDF bytes.

    Args:
        data: raw file bytes
        content_type: declared MIME type; anything but application/pdf is
            rejected without being opened

    Returns:
        The extracted text (possibly empty), or None when the input is not
        a PDF or cannot be decoded at all
    """
    if content_type and content_type != PDF_CONTENT_TYPE:
        logger.warning(f"Unsupported file type: {content_type}. Only PDF files are supported.")
        return None
    if not data:
        logger.warning("Empty PDF payload")
        return None

    logger.debug(f"Parsing PDF buffer, size: {len(data)} bytes")
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            text = _flattened_text(doc)
            if not text.strip():
                logger.warning("Built-in text extraction returned empty result, trying fallback method")
                text = _traverse(doc)
    except Exception as e:
        logger.error(f"Error extracting text from PDF: {e}")
        return None

    if not text.strip():
        logger.warning("Could not extract any text from the PDF")
    logger.debug(f"Extracted {len(text)} characters of text")
    return text
