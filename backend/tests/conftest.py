"""
Pytest configuration
Test database, fake Supabase Storage backend, fake Gemini client, API client
"""
import json
import time
from types import SimpleNamespace
from typing import Dict, List
from unittest.mock import AsyncMock, MagicMock

import fitz  # PyMuPDF
import httpx
import jwt
import pytest

from candidate_crm.config import get_settings
from candidate_crm.database import Database
from candidate_crm.main import create_app
from candidate_crm.repositories import CandidateRepository, NoteRepository
from candidate_crm.services.resume_extractor import ResumeExtractor
from candidate_crm.services.resume_storage import ResumeStorage

SUPABASE_URL = "https://project.supabase.co"
SERVICE_KEY = "service-role-key"
STORAGE_SIGNING_SECRET = "storage-jwt-secret"

SAMPLE_PROFILE = {
    "name": "Ada Lovelace",
    "email": "ada@x.com",
    "phone": "+44 20 7946 0000",
    "wechat": None,
    "current_company": "Analytical Engines Ltd",
    "linkedin_url": "https://linkedin.com/in/ada",
    "google_scholar": None,
    "school": "University of London",
    "job_type": "software_engineer",
    "experience": [
        {
            "company": "Analytical Engines Ltd",
            "position": "Programmer",
            "start_date": "1842",
            "end_date": "1843",
            "description": "Wrote the first published algorithm.",
        }
    ],
    "education": ["Private tutoring in mathematics"],
    "skills": ["Mathematics", "Algorithms"],
}


# ==================== Database Fixtures ====================

@pytest.fixture
async def database(tmp_path):
    """A fresh SQLite database per test."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.init_models()
    yield db
    await db.dispose()


@pytest.fixture
async def db_session(database):
    async with database.session_maker() as session:
        yield session


@pytest.fixture
def candidate_repository(db_session) -> CandidateRepository:
    return CandidateRepository(db_session, "user_1")


@pytest.fixture
def other_candidate_repository(db_session) -> CandidateRepository:
    return CandidateRepository(db_session, "user_2")


@pytest.fixture
def note_repository(db_session) -> NoteRepository:
    return NoteRepository(db_session, "user_1")


@pytest.fixture
def other_note_repository(db_session) -> NoteRepository:
    return NoteRepository(db_session, "user_2")


# ==================== Fake Supabase Storage ====================

class FakeSupabaseStorage:
    """
    In-memory stand-in for the Supabase Storage REST API, mounted behind
    httpx.MockTransport so ResumeStorage runs unmodified.
    """

    def __init__(self, bucket: str = "resumes"):
        self.bucket = bucket
        self.objects: Dict[str, bytes] = {}
        self.requests: List[httpx.Request] = []
        self.fail_uploads = False
        self.fail_lists = False
        self.fail_deletes = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("Authorization") != f"Bearer {SERVICE_KEY}":
            return httpx.Response(401, json={"error": "invalid key"})

        path = request.url.path.removeprefix("/storage/v1/")
        list_prefix = f"object/list/{self.bucket}"
        sign_prefix = f"object/sign/{self.bucket}/"
        object_prefix = f"object/{self.bucket}/"

        if request.method == "POST" and path == list_prefix:
            return self._list(json.loads(request.content))
        if request.method == "POST" and path.startswith(sign_prefix):
            return self._sign(path[len(sign_prefix):], json.loads(request.content))
        if request.method == "POST" and path.startswith(object_prefix):
            return self._upload(path[len(object_prefix):], request.content)
        if request.method == "DELETE" and path == f"object/{self.bucket}":
            return self._delete(json.loads(request.content))
        return httpx.Response(404, json={"error": "route not found"})

    def _upload(self, key: str, content: bytes) -> httpx.Response:
        if self.fail_uploads:
            return httpx.Response(500, json={"error": "internal"})
        if key in self.objects:
            return httpx.Response(400, json={"statusCode": "409", "error": "Duplicate"})
        self.objects[key] = content
        return httpx.Response(200, json={"Key": f"{self.bucket}/{key}"})

    def _list(self, body: dict) -> httpx.Response:
        if self.fail_lists:
            return httpx.Response(500, json={"error": "internal"})
        prefix = body.get("prefix", "").rstrip("/")
        search = body.get("search", "")
        entries = []
        for key in self.objects:
            folder, _, name = key.rpartition("/")
            if folder == prefix and search in name:
                entries.append({"name": name, "id": key})
        return httpx.Response(200, json=entries)

    def _sign(self, key: str, body: dict) -> httpx.Response:
        if key not in self.objects:
            return httpx.Response(400, json={"error": "not_found"})
        token = jwt.encode(
            {"url": f"{self.bucket}/{key}", "exp": int(time.time()) + body["expiresIn"]},
            STORAGE_SIGNING_SECRET,
            algorithm="HS256",
        )
        return httpx.Response(200, json={"signedURL": f"/object/sign/{self.bucket}/{key}?token={token}"})

    def _delete(self, body: dict) -> httpx.Response:
        if self.fail_deletes:
            return httpx.Response(500, json={"error": "internal"})
        removed = [{"name": key} for key in body["prefixes"] if self.objects.pop(key, None) is not None]
        return httpx.Response(200, json=removed)


@pytest.fixture
def fake_storage() -> FakeSupabaseStorage:
    return FakeSupabaseStorage()


@pytest.fixture
async def resume_storage(fake_storage):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_storage.handler))
    yield ResumeStorage(client, SUPABASE_URL, SERVICE_KEY)
    await client.aclose()


# ==================== Fake Gemini Client ====================

def make_genai_client(response_text: str = None):
    """Mock google-genai client whose async generate_content returns ``response_text``."""
    if response_text is None:
        response_text = json.dumps(SAMPLE_PROFILE)
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=SimpleNamespace(text=response_text))
    return client


@pytest.fixture
def genai_client():
    return make_genai_client()


@pytest.fixture
def resume_extractor(genai_client) -> ResumeExtractor:
    return ResumeExtractor(genai_client, model="gemini-test")


# ==================== PDF Fixtures ====================

def build_pdf(*pages: str) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def resume_pdf() -> bytes:
    return build_pdf("Ada Lovelace ada@x.com", "Analytical Engines Ltd")


# ==================== API Fixtures ====================

@pytest.fixture
def auth_headers():
    """Bearer headers for a user id, signed the way the auth provider would."""
    settings = get_settings()

    def _headers(user_id: str = "user_1") -> dict:
        token = jwt.encode({"sub": user_id}, settings.secret_key, algorithm=settings.algorithm)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def api(database, resume_storage, resume_extractor):
    app = create_app()
    app.state.db = database
    app.state.resume_storage = resume_storage
    app.state.resume_extractor = resume_extractor

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
