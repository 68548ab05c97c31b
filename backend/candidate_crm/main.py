import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from .config import Settings, get_settings
from .database import Database
from .errors import CRMError, crm_error_handler
from .routers import candidates_router, notes_router, resumes_router, export_router
from .services.resume_extractor import ResumeExtractor, create_genai_client
from .services.resume_storage import ResumeStorage

logger = logging.getLogger(__name__)


class NoCacheMiddleware(BaseHTTPMiddleware):
    """Prevents browser caching of API responses"""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
        return response


def build_lifespan(settings: Settings):

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: one handle per backing service, shared by all requests
        app.state.db = Database(settings.database_url, echo=settings.debug)
        await app.state.db.init_models()

        http_client = httpx.AsyncClient(timeout=settings.storage_timeout_seconds)
        app.state.resume_storage = ResumeStorage(
            http_client,
            supabase_url=settings.supabase_url,
            service_key=settings.supabase_service_role_key,
            bucket=settings.resume_bucket,
            signed_url_expires_in=settings.signed_url_expires_in,
        )
        if not app.state.resume_storage.configured:
            logger.warning("Supabase storage not configured. Resume uploads will fail.")

        app.state.resume_extractor = ResumeExtractor(
            create_genai_client(settings.gemini_api_key, settings.gemini_timeout_ms),
            model=settings.gemini_model,
            char_limit=settings.resume_text_char_limit,
        )
        yield
        # Shutdown
        await http_client.aclose()
        await app.state.db.dispose()

    return lifespan


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Recruiter candidate tracking API",
        version="1.0.0",
        lifespan=build_lifespan(settings),
        docs_url="/docs" if settings.debug else None,  # Disable docs in production
        redoc_url="/redoc" if settings.debug else None,
    )

    # CORS middleware - uses origins from environment variable
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )
    app.add_middleware(NoCacheMiddleware)

    app.add_exception_handler(CRMError, crm_error_handler)

    app.include_router(candidates_router)
    app.include_router(notes_router)
    app.include_router(resumes_router)
    app.include_router(export_router)

    @app.get("/")
    async def root():
        return {"message": settings.app_name, "status": "running", "version": "1.0.0"}

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint for load balancer"""
        tables = await request.app.state.db.check_tables()
        return {"status": "healthy", "tables": tables}

    return app


app = create_app()
