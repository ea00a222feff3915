"""Service client package: async HTTP interfaces to external collaborators.

WHY: Transcription and video burn-in are delegated to external services.
This package keeps every outbound HTTP call behind two client classes.

RULES:
- All HTTP calls go through these clients (no direct httpx usage elsewhere)
- Clients are constructed per use, never shared at module level
"""

from supacaptions.api.client import (
    ProcessingAPIError,
    ProcessingClient,
    TranscriptionAPIError,
    TranscriptionClient,
)
from supacaptions.api.models import ProcessingRequest, ProcessingResult

__all__ = [
    "ProcessingAPIError",
    "ProcessingClient",
    "ProcessingRequest",
    "ProcessingResult",
    "TranscriptionAPIError",
    "TranscriptionClient",
]
