"""Configuration constants, supported file types, and .env loading.

WHY: Service URLs, model names and accepted file types are the values
most likely to change between deployments. Keeping them in one module
makes them easy to find and override.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level strings and sets, each overridable through the
environment. load_api_key() provides a clear error when the key is
missing.

RULES:
- API keys are loaded from .env via python-dotenv, never hardcoded
- An empty PROCESSING_SERVICE_URL disables video burn-in; jobs then
  complete once the subtitle file is compiled
- PUBLIC_BASE_URL is how the processing service reaches this server
  (source-video download and completion webhook)
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Supported file extensions
# ---------------------------------------------------------------------------

SUPPORTED_MEDIA_FORMATS: set[str] = {
    ".flac", ".m4a", ".mp3", ".mp4", ".mpeg", ".mpga",
    ".oga", ".ogg", ".wav", ".webm",
}
"""Audio/video extensions accepted by the transcription endpoint (lowercase, with dot)."""

TRANSCRIPT_FORMATS: set[str] = {".srt"}
"""Timed-text extensions the compiler reads directly."""

# ---------------------------------------------------------------------------
# Service configuration defaults
# ---------------------------------------------------------------------------

OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
TRANSCRIPTION_MODEL = os.getenv("TRANSCRIPTION_MODEL", "whisper-1")
PROCESSING_SERVICE_URL = os.getenv("PROCESSING_SERVICE_URL", "").strip()
PROCESSING_SERVICE_TOKEN = os.getenv("PROCESSING_SERVICE_TOKEN", "").strip()
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000").rstrip("/")


def load_api_key() -> str:
    """Load the transcription API key from the environment.

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("OPENAI_API_KEY", "").strip()
    if not key:
        raise ValueError(
            "Transcription API key not configured. "
            "Add OPENAI_API_KEY to the .env file in the app folder."
        )
    return key
