"""Tests for the transcription and processing service clients.

WHY: Both clients talk to services we do not control. These tests pin
the request shape each service expects and the typed errors raised for
the failures the pipeline has to report.

HOW: httpx.MockTransport stands in for the network; each handler records
the request it received and returns a canned response.
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from supacaptions.api.client import (
    ProcessingAPIError,
    ProcessingClient,
    ServiceAPIError,
    TranscriptionAPIError,
    TranscriptionClient,
)
from supacaptions.api.models import ProcessingRequest, ProcessingResult


def _recording_transport(response: httpx.Response, seen: list) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return response

    return httpx.MockTransport(handler)


def _processing_request() -> ProcessingRequest:
    return ProcessingRequest(
        job_id="abc123",
        video_url="http://localhost:8000/jobs/abc123/source",
        subtitles="[Script Info]\n",
        output_filename="clip-captioned.mp4",
        callback_url="http://localhost:8000/webhooks/processing-complete?jobId=abc123",
    )


# ---------------------------------------------------------------------------
# TranscriptionClient
# ---------------------------------------------------------------------------


class TestTranscriptionClient:

    def test_returns_srt_text(self, tmp_path, hello_srt):
        media = tmp_path / "clip.mp4"
        media.write_bytes(b"fake video")
        seen = []
        transport = _recording_transport(httpx.Response(200, text=hello_srt), seen)

        async def go():
            async with TranscriptionClient(
                api_key="sk-test", base_url="https://stt.example.com/v1", transport=transport
            ) as client:
                return await client.transcribe(media)

        assert asyncio.run(go()) == hello_srt
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == "https://stt.example.com/v1/audio/transcriptions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = request.content
        assert b'name="response_format"' in body
        assert b"srt" in body
        assert b'name="model"' in body
        assert b'filename="clip.mp4"' in body

    def test_status_callback(self, tmp_path):
        media = tmp_path / "clip.wav"
        media.write_bytes(b"fake audio")
        transport = _recording_transport(httpx.Response(200, text=""), [])
        messages = []

        async def go():
            async with TranscriptionClient(api_key="k", transport=transport) as client:
                await client.transcribe(media, on_status=messages.append)

        asyncio.run(go())
        assert messages == ["Transcribing clip.wav..."]

    def test_error_response_raises(self, tmp_path):
        media = tmp_path / "clip.mp4"
        media.write_bytes(b"fake video")
        transport = _recording_transport(httpx.Response(401, text="invalid key"), [])

        async def go():
            async with TranscriptionClient(api_key="bad", transport=transport) as client:
                await client.transcribe(media)

        with pytest.raises(TranscriptionAPIError) as exc_info:
            asyncio.run(go())
        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "invalid key"
        assert isinstance(exc_info.value, ServiceAPIError)

    def test_requires_context_manager(self, tmp_path):
        client = TranscriptionClient(api_key="k")
        with pytest.raises(RuntimeError, match="async context manager"):
            asyncio.run(client.transcribe(tmp_path / "clip.mp4"))

    def test_missing_api_key_raises(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            TranscriptionClient()


# ---------------------------------------------------------------------------
# ProcessingClient
# ---------------------------------------------------------------------------


class TestProcessingClient:

    def test_submits_camel_case_json(self):
        seen = []
        transport = _recording_transport(
            httpx.Response(202, json={"accepted": True}), seen
        )

        async def go():
            async with ProcessingClient(
                base_url="https://burn.example.com/", token="tok", transport=transport
            ) as client:
                return await client.submit(_processing_request())

        assert asyncio.run(go()) == {"accepted": True}
        request = seen[0]
        assert str(request.url) == "https://burn.example.com/process"
        assert request.headers["Authorization"] == "Bearer tok"
        payload = json.loads(request.content)
        assert payload == {
            "jobId": "abc123",
            "videoUrl": "http://localhost:8000/jobs/abc123/source",
            "subtitles": "[Script Info]\n",
            "outputFilename": "clip-captioned.mp4",
            "callbackUrl": "http://localhost:8000/webhooks/processing-complete?jobId=abc123",
        }

    def test_empty_body_returns_empty_dict(self):
        transport = _recording_transport(httpx.Response(200), [])

        async def go():
            async with ProcessingClient(base_url="https://burn.example.com", transport=transport) as client:
                return await client.submit(_processing_request())

        assert asyncio.run(go()) == {}

    def test_non_json_body_counts_as_accepted(self):
        transport = _recording_transport(httpx.Response(202, text="OK, queued"), [])

        async def go():
            async with ProcessingClient(base_url="https://burn.example.com", transport=transport) as client:
                return await client.submit(_processing_request())

        assert asyncio.run(go()) == {}

    def test_explicit_rejection_raises(self):
        transport = _recording_transport(
            httpx.Response(200, json={"accepted": False, "message": "queue full"}), []
        )

        async def go():
            async with ProcessingClient(base_url="https://burn.example.com", transport=transport) as client:
                await client.submit(_processing_request())

        with pytest.raises(ProcessingAPIError) as exc_info:
            asyncio.run(go())
        assert exc_info.value.status_code == 200
        assert exc_info.value.message == "queue full"

    def test_rejection_without_message(self):
        transport = _recording_transport(httpx.Response(200, json={"accepted": False}), [])

        async def go():
            async with ProcessingClient(base_url="https://burn.example.com", transport=transport) as client:
                await client.submit(_processing_request())

        with pytest.raises(ProcessingAPIError, match="rejected"):
            asyncio.run(go())

    def test_no_token_sends_no_authorization(self, monkeypatch):
        monkeypatch.setattr("supacaptions.api.client.PROCESSING_SERVICE_TOKEN", "")
        seen = []
        transport = _recording_transport(httpx.Response(200), seen)

        async def go():
            async with ProcessingClient(base_url="https://burn.example.com", transport=transport) as client:
                await client.submit(_processing_request())

        asyncio.run(go())
        assert "Authorization" not in seen[0].headers

    def test_error_response_raises(self):
        transport = _recording_transport(httpx.Response(500, text="renderer down"), [])

        async def go():
            async with ProcessingClient(base_url="https://burn.example.com", transport=transport) as client:
                await client.submit(_processing_request())

        with pytest.raises(ProcessingAPIError) as exc_info:
            asyncio.run(go())
        assert exc_info.value.status_code == 500
        assert "Processing API error 500" in str(exc_info.value)

    def test_unconfigured_url_raises(self, monkeypatch):
        monkeypatch.setattr("supacaptions.api.client.PROCESSING_SERVICE_URL", "")
        with pytest.raises(ValueError, match="PROCESSING_SERVICE_URL"):
            ProcessingClient()


# ---------------------------------------------------------------------------
# ProcessingResult
# ---------------------------------------------------------------------------


class TestProcessingResult:

    def test_success(self):
        result = ProcessingResult.from_dict({
            "success": True,
            "outputUrl": "https://cdn.example.com/out.mp4",
            "processingDetails": {"durationSeconds": 3},
        })
        assert result.success is True
        assert result.output_url == "https://cdn.example.com/out.mp4"
        assert result.details == {"durationSeconds": 3}
        assert result.error is None

    def test_failure(self):
        result = ProcessingResult.from_dict({"success": False, "error": "bad codec"})
        assert result.success is False
        assert result.error == "bad codec"
        assert result.details == {}

    @pytest.mark.parametrize("body", [{}, {"success": "true"}, {"success": 1}])
    def test_only_literal_true_is_success(self, body):
        assert ProcessingResult.from_dict(body).success is False
