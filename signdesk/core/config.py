"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend-specific requirements (Supabase URL and key,
local storage root) are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_backends (Supabase credentials when the Supabase storage
    backend is selected, storage root for the local backend).
    """

    # App
    app_name: str = "signdesk"
    app_version: str = "1.0.0"
    debug: bool = False

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Request / middleware
    request_id_header: str = "X-Request-ID"
    http_timeout_seconds: float = 30.0

    # Backend-as-a-service (PostgREST tables + object storage + auth)
    supabase_url: str = ""
    supabase_service_key: SecretStr = SecretStr("")
    supabase_jwt_secret: SecretStr = SecretStr("")
    jwt_algorithm: str = "HS256"
    jwt_audience: str | None = "authenticated"

    # Tables
    documents_table: str = "documents"
    signatures_table: str = "document_signatures"
    settings_table: str = "settings"

    # Storage: "supabase" (remote buckets) or "local" (filesystem, dev/tests)
    storage_backend: str = "supabase"
    storage_root: str = "/var/signdesk/storage"
    storage_base_url: str | None = None
    signatures_bucket: str = "signatures"
    organization_seals_bucket: str = "organization-seals"

    # Signatures
    max_signature_bytes: int = 512 * 1024  # a few hundred KB of PNG at most
    seal_scan_limit: int = 20

    # Questionnaire generation (OpenAI-compatible chat completions)
    llm_base_url: str = "https://api.openai.com/v1"
    llm_api_key: SecretStr | None = None
    llm_model: str = "o3-mini"
    llm_timeout_seconds: float = 120.0

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_backends(self) -> "Settings":
        """Validate storage backend and its required settings.

        - supabase: SUPABASE_URL and SUPABASE_SERVICE_KEY required.
        - local: STORAGE_ROOT required.
        """
        if self.storage_backend == "supabase":
            if not self.supabase_url:
                raise ValueError(
                    "SUPABASE_URL is required when storage_backend is 'supabase'. "
                    "Set in environment or .env file."
                )
            if not self.supabase_service_key.get_secret_value():
                raise ValueError(
                    "SUPABASE_SERVICE_KEY is required when storage_backend is 'supabase'."
                )
        elif self.storage_backend == "local":
            if not self.storage_root:
                raise ValueError("STORAGE_ROOT is required when storage_backend is 'local'.")
        else:
            raise ValueError(
                f"Invalid storage_backend '{self.storage_backend}'. "
                "Must be one of: 'supabase', 'local'"
            )
        if self.max_signature_bytes <= 0:
            raise ValueError("MAX_SIGNATURE_BYTES must be positive")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
