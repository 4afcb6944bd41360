"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (SUPABASE_URL, SUPABASE_SERVICE_KEY,
SUPABASE_JWT_SECRET) are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_required (the Supabase project URL, service-role key and JWT
    secret).
    """

    # App
    app_name: str = "school-admin"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Supabase: PostgREST store + GoTrue identity provider (service-role key)
    supabase_url: str = ""
    supabase_service_key: SecretStr = SecretStr("")
    http_timeout_seconds: float = 30.0

    # Access tokens are issued by Supabase Auth; we only verify them.
    supabase_jwt_secret: SecretStr = SecretStr("")
    supabase_jwt_audience: str = "authenticated"
    jwt_algorithm: str = "HS256"

    # Provisioning
    default_storage_quota_gb: int = 100
    branch_header_name: str = "X-Branch-ID"

    # Rate limiting (slowapi syntax, e.g. "5/minute")
    rate_limit_register: str = "5/minute"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request / middleware
    request_id_header: str = "X-Request-ID"
    correlation_id_header: str = "X-Correlation-ID"

    # OpenTelemetry
    telemetry_enabled: bool = True
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required Supabase settings."""
        if not self.supabase_url:
            raise ValueError(
                "SUPABASE_URL is required (e.g. https://<project>.supabase.co). "
                "Set in environment or .env file."
            )
        if not self.supabase_service_key.get_secret_value():
            raise ValueError(
                "SUPABASE_SERVICE_KEY is required (service-role key from the Supabase dashboard)."
            )
        if not self.supabase_jwt_secret.get_secret_value():
            raise ValueError(
                "SUPABASE_JWT_SECRET is required to verify access tokens "
                "(Project Settings → API → JWT Secret)."
            )
        if self.default_storage_quota_gb <= 0:
            raise ValueError("DEFAULT_STORAGE_QUOTA_GB must be positive")
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
