"""Async HTTP clients for the transcription and video-processing services.

WHY: The pipeline has two external collaborators: a speech-to-text
endpoint that turns a media file into SRT text, and a processing service
that burns the compiled subtitle track into the video. Wrapping each in a
small client keeps HTTP details out of the server and CLI.

HOW: Both clients wrap an httpx.AsyncClient and are async context
managers: enter to open the connection pool, exit to close it. Clients
are constructed explicitly by the caller for each pipeline run rather
than shared at module level.

RULES:
- Always use the async context manager (async with TranscriptionClient() as c:)
- Transcription requests ask for ``response_format=srt`` and return text
- Non-2xx responses raise a typed error carrying status code and body
- No retries; the caller decides what a failure means
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from supacaptions.api.models import ProcessingRequest
from supacaptions.config import (
    OPENAI_BASE_URL,
    PROCESSING_SERVICE_TOKEN,
    PROCESSING_SERVICE_URL,
    TRANSCRIPTION_MODEL,
    load_api_key,
)

logger = logging.getLogger(__name__)


class ServiceAPIError(Exception):
    """Raised when an external service returns an error response.

    RULES:
    - Always include status_code and message
    - message is the response body text or a summary
    """

    service = "Service"

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"{self.service} API error {status_code}: {message}")


class TranscriptionAPIError(ServiceAPIError):
    """Raised when the transcription endpoint rejects a request."""

    service = "Transcription"


class ProcessingAPIError(ServiceAPIError):
    """Raised when the processing service rejects a job."""

    service = "Processing"


class _AsyncServiceClient:
    """Shared async-context-manager plumbing for the service clients."""

    def __init__(
        self,
        base_url: str,
        headers: Dict[str, str],
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._headers = headers
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=httpx.Timeout(300.0, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "{} must be used as an async context manager: "
                "async with {}() as client: ...".format(
                    type(self).__name__, type(self).__name__
                )
            )
        return self._client


class TranscriptionClient(_AsyncServiceClient):
    """Async client for an OpenAI-compatible audio transcription endpoint.

    RULES:
    - api_key defaults to load_api_key() from .env
    - base_url defaults to OPENAI_BASE_URL, model to TRANSCRIPTION_MODEL
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(
            base_url or OPENAI_BASE_URL,
            {"Authorization": f"Bearer {api_key or load_api_key()}"},
            transport=transport,
        )
        self._model = model or TRANSCRIPTION_MODEL

    async def transcribe(
        self,
        file_path: Path,
        on_status: Callable[[str], None] | None = None,
    ) -> str:
        """Upload a media file and return its transcript as SRT text.

        Args:
            file_path: Path to the audio/video file.
            on_status: Optional callback for status updates.

        Returns:
            The SRT body exactly as returned by the service.

        Raises:
            TranscriptionAPIError: On a non-2xx response.
        """
        client = self._ensure_client()
        file_path = Path(file_path)
        if on_status:
            on_status("Transcribing {}...".format(file_path.name))

        with open(file_path, "rb") as f:
            resp = await client.post(
                "/audio/transcriptions",
                data={"model": self._model, "response_format": "srt"},
                files={"file": (file_path.name, f)},
            )

        if resp.status_code != 200:
            raise TranscriptionAPIError(resp.status_code, resp.text)

        logger.info("Transcribed %s (%d chars of SRT)", file_path.name, len(resp.text))
        return resp.text


class ProcessingClient(_AsyncServiceClient):
    """Async client for the external subtitle burn-in service.

    RULES:
    - base_url defaults to PROCESSING_SERVICE_URL; it must not be empty
    - The Bearer header is only sent when a token is configured
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        base_url = base_url or PROCESSING_SERVICE_URL
        if not base_url:
            raise ValueError(
                "Processing service not configured. "
                "Set PROCESSING_SERVICE_URL in the .env file."
            )
        token = token or PROCESSING_SERVICE_TOKEN
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        super().__init__(base_url, headers, transport=transport)

    async def submit(self, request: ProcessingRequest) -> Dict[str, Any]:
        """Submit a burn-in job and return the service's acknowledgement.

        RULES:
        - An empty or non-JSON 2xx body counts as accepted and returns {}
        - ``"accepted": false`` in the body is a rejection

        Raises:
            ProcessingAPIError: On a non-2xx response or an explicit rejection.
        """
        client = self._ensure_client()
        resp = await client.post("/process", json=request.to_dict())

        if resp.status_code not in (200, 201, 202):
            raise ProcessingAPIError(resp.status_code, resp.text)

        if not resp.content:
            ack: Dict[str, Any] = {}
        else:
            try:
                body = resp.json()
            except ValueError:
                logger.warning(
                    "Processing service returned a non-JSON body for job %s",
                    request.job_id,
                )
                body = {}
            ack = body if isinstance(body, dict) else {}

        if ack.get("accepted") is False:
            raise ProcessingAPIError(
                resp.status_code, ack.get("message") or "Job rejected by processing service"
            )

        logger.info("Submitted job %s to processing service", request.job_id)
        return ack
