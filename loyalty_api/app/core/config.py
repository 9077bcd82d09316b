"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
service starts in demo mode (in-memory store with seed data) without
any setup.  Override values via environment variables before the
application is imported.
"""

import os
from dataclasses import dataclass


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "LY Loyalty API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = _flag("DEBUG", "false")
    environment: str = os.getenv("ENVIRONMENT", "development")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Optional path of a log file.  Console logging is always enabled.
    log_file: str = os.getenv("LOG_FILE", "")

    # The in-memory store is the only bundled backend.  Turning this off
    # makes startup log guidance instead of connecting anywhere.
    use_mock_db: bool = _flag("USE_MOCK_DB", "true")

    # Load the demo companies, programs, users and passes at startup.
    seed_demo_data: bool = _flag("SEED_DEMO_DATA", "true")

    # Comma-separated list of allowed CORS origins.
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
