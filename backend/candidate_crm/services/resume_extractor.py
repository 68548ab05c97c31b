"""
Resume data extraction using Gemini structured output.

Sends resume text with a strict JSON schema so the response always parses
into ExtractedResumeProfile.
"""
import json
import logging
from typing import Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError

from ..errors import ExtractionConfigError, ExtractionServiceError
from ..models.candidate import JobType
from ..schemas.resume import ExtractedResumeProfile

logger = logging.getLogger(__name__)

DEFAULT_CHAR_LIMIT = 15000

JOB_TYPE_VALUES = [job_type.value for job_type in JobType]


# ============================================================================
# Extraction Prompt & Schema
# ============================================================================

RESUME_SYSTEM_PROMPT = f"""
You are an expert resume parser assistant. Extract the following information from the provided resume text:

- Full name
- Email address
- Phone number
- WeChat ID (if available)
- Current company or most recent employer
- LinkedIn URL (if available)
- Google Scholar URL (if available)
- Educational institution (most recent)
- Most appropriate job type from this list: {", ".join(JOB_TYPE_VALUES)}
- Work experience (as an array with company, position, dates, and description)
- Education history (as an array of brief descriptions)
- Technical and professional skills (as an array)

If any field is not found in the resume, return null for that field. Do not guess or invent values.
For job type, make your best guess based on the resume content, defaulting to software_engineer if unclear.
For arrays, limit to the most relevant 3-5 items.
"""


def _nullable_string() -> dict:
    return {"type": ["string", "null"]}


RESUME_EXTRACTION_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "email": _nullable_string(),
        "phone": _nullable_string(),
        "wechat": _nullable_string(),
        "current_company": _nullable_string(),
        "linkedin_url": _nullable_string(),
        "google_scholar": _nullable_string(),
        "school": _nullable_string(),
        "job_type": {"type": "string", "enum": JOB_TYPE_VALUES},
        "experience": {
            "type": ["array", "null"],
            "items": {
                "type": "object",
                "properties": {
                    "company": {"type": "string"},
                    "position": {"type": "string"},
                    "start_date": {"type": "string"},
                    "end_date": {"type": "string"},
                    "description": {"type": "string"},
                },
                "required": ["company", "position", "start_date", "end_date", "description"],
                "additionalProperties": False,
            },
        },
        "education": {"type": ["array", "null"], "items": {"type": "string"}},
        "skills": {"type": ["array", "null"], "items": {"type": "string"}},
    },
    "required": [
        "name", "email", "phone", "wechat", "current_company", "linkedin_url",
        "google_scholar", "school", "job_type", "experience", "education", "skills",
    ],
    "additionalProperties": False,
}


# ============================================================================
# Client & Extractor
# ============================================================================

def create_genai_client(api_key: str, timeout_ms: int = 60000) -> Optional[genai.Client]:
    """Build a Gemini client, or None when no API key is configured."""
    if not api_key:
        logger.warning("GEMINI_API_KEY not set - resume extraction disabled")
        return None
    return genai.Client(api_key=api_key, http_options=types.HttpOptions(timeout=timeout_ms))


class ResumeExtractor:
    """One schema-constrained Gemini call per resume."""

    def __init__(
        self,
        client: Optional[genai.Client],
        model: str = "gemini-2.0-flash",
        char_limit: int = DEFAULT_CHAR_LIMIT,
    ):
        self.client = client
        self.model = model
        self.char_limit = char_limit

    async def extract(self, text: str) -> ExtractedResumeProfile:
        """
        Turn resume text into a structured profile.

        The text is cut at ``char_limit`` characters before sending.

        Raises:
            ExtractionConfigError: no client configured
            ExtractionServiceError: the call failed or the reply did not parse
        """
        if self.client is None:
            raise ExtractionConfigError("Gemini API key not configured")

        truncated = text[:self.char_limit]
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=truncated,
                config=types.GenerateContentConfig(
                    system_instruction=RESUME_SYSTEM_PROMPT,
                    temperature=0.1,
                    response_mime_type="application/json",
                    response_json_schema=RESUME_EXTRACTION_SCHEMA,
                ),
            )
        except genai_errors.APIError as e:
            logger.error(f"Gemini API error during resume extraction: {e}")
            raise ExtractionServiceError()
        except Exception as e:
            # Transport failures and timeouts surface from the HTTP layer
            logger.error(f"Resume extraction call failed: {e}")
            raise ExtractionServiceError()

        response_text = (response.text or "").strip()
        try:
            profile = ExtractedResumeProfile.model_validate(json.loads(response_text))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Failed to parse extraction response: {e}")
            raise ExtractionServiceError()

        logger.info(
            f"Resume data extracted: job_type={profile.job_type.value}, "
            f"{len(profile.skills or [])} skills, {len(profile.experience or [])} experience entries"
        )
        return profile
