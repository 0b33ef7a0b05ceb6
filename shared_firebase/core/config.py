"""Application configuration (settings and environment).

Single source of truth for process-wide configuration. Uses pydantic-settings
with .env support. Per-call options (page size, subcollection names, guard
prefix) are passed to the engine directly; the values here are defaults and
connection details only.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared_firebase.core.constants import DEFAULT_PAGE_SIZE, MAX_BATCH_WRITES

_TELEMETRY_EXPORTERS = ("console", "otlp", "none")


class Settings(BaseSettings):
    """Settings loaded from environment and .env.

    Firestore credentials are optional here: callers that inject their own
    store (tests, the in-memory fake) never need them. open_tree_services
    raises FirestoreNotConfiguredException when it needs them and they are
    missing.
    """

    # App
    app_name: str = "shared-firebase"
    app_version: str = "0.1.0"
    debug: bool = False

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None  # Path to JSON file
    firestore_database: str = "(default)"
    firestore_http_timeout_seconds: float = 30.0

    # Engine
    default_page_size: int = DEFAULT_PAGE_SIZE

    # OpenTelemetry
    telemetry_enabled: bool = False
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
    def validate_engine_and_telemetry(self) -> "Settings":
        """Validate page size bounds and telemetry exporter settings."""
        if not 1 <= self.default_page_size <= MAX_BATCH_WRITES:
            raise ValueError(
                f"DEFAULT_PAGE_SIZE must be between 1 and {MAX_BATCH_WRITES}, "
                f"got: {self.default_page_size}"
            )
        if self.firestore_http_timeout_seconds <= 0:
            raise ValueError("FIRESTORE_HTTP_TIMEOUT_SECONDS must be positive")
        if self.telemetry_exporter not in _TELEMETRY_EXPORTERS:
            raise ValueError(
                f"telemetry_exporter must be one of {', '.join(_TELEMETRY_EXPORTERS)}, "
                f"got: {self.telemetry_exporter!r}"
            )
        if self.telemetry_exporter == "otlp" and not self.telemetry_otlp_endpoint:
            raise ValueError(
                "TELEMETRY_OTLP_ENDPOINT is required when telemetry_exporter is 'otlp'."
            )
        if not 0.0 <= self.telemetry_sample_rate <= 1.0:
            raise ValueError("TELEMETRY_SAMPLE_RATE must be between 0.0 and 1.0")
        return self

    @property
    def has_firebase_credentials(self) -> bool:
        """True when a service account key or key file path is configured."""
        has_key = (
            self.firebase_service_account_key is not None
            and bool(self.firebase_service_account_key.get_secret_value())
        )
        return has_key or bool(self.firebase_service_account_path)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
