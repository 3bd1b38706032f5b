"""Runtime configuration read from environment variables.

Values are resolved once at import time. Tests and embedding code pass
explicit overrides to `main.create_app` instead of mutating these.
"""

import os


def _env_bool(key: str, default: bool) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Storage: "memory" keeps records in-process, "sql" uses DATABASE_URL
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").lower()
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///glucose_tracker.db")

# Sessions
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "glucose_session")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(24 * 60 * 60)))
SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE", False)

# Meal generation provider
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
OPENAI_TIMEOUT = float(os.getenv("OPENAI_TIMEOUT", "20"))

SEED_DEMO_DATA = _env_bool("SEED_DEMO_DATA", True)
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR", os.path.join(os.path.dirname(__file__), "..", "logs"))
