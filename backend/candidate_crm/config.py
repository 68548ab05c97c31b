from pydantic_settings import BaseSettings
from functools import lru_cache
import os


class Settings(BaseSettings):
    app_name: str = "Candidate CRM API"
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Database - supports both SQLite (local) and PostgreSQL (production)
    database_url: str = "sqlite+aiosqlite:///./candidate_crm.db"

    # Caller identity - bearer tokens are issued by the external auth provider
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"

    # CORS - comma-separated list of allowed origins
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # Supabase Storage (resume files)
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    resume_bucket: str = "resumes"
    signed_url_expires_in: int = 60 * 60 * 24 * 7  # 7 days
    storage_timeout_seconds: float = 60.0
    max_resume_size_mb: int = 10

    # AI/LLM Configuration
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"
    gemini_timeout_ms: int = 60000
    resume_text_char_limit: int = 15000

    class Config:
        env_file = ".env"
        extra = "ignore"
        # Make field names case-insensitive for environment variables
        case_sensitive = False

    def get_cors_origins(self) -> list:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def max_resume_size_bytes(self) -> int:
        return self.max_resume_size_mb * 1024 * 1024


@lru_cache()
def get_settings() -> Settings:
    return Settings()
