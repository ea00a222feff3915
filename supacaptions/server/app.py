"""FastAPI application for caption compilation and captioned-video jobs.

WHY: The web front end uploads a video with the user's caption style and
later needs the captioned result. Other tools only want the compiler:
transcript in, ASS track out. Both are served here with OpenAPI docs.

HOW: POST /captions compiles synchronously. POST /jobs stores the upload,
creates a job, and runs transcribe → compile → submit-for-burn-in as a
background task. The processing service fetches the source video from
GET /jobs/{id}/source and reports back on POST
/webhooks/processing-complete, which completes or fails the job.

RULES:
- Error responses use a consistent ErrorResponse schema
- Background work uses FastAPI BackgroundTasks wrapping asyncio.run()
- Service clients are constructed inside each pipeline run
- The job store is created at import; expired jobs are purged every 5 minutes
- With no PROCESSING_SERVICE_URL, jobs complete after compiling
- The processing webhook is accepted only while a job is in PROCESSING;
  any other status answers 409 and leaves the job untouched
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Annotated, Optional

from fastapi import BackgroundTasks, FastAPI, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import FileResponse, Response
from pydantic import ValidationError

from supacaptions import __version__
from supacaptions.api.client import ProcessingClient, TranscriptionClient
from supacaptions.api.models import ProcessingRequest, ProcessingResult
from supacaptions.compiler import compile_captions
from supacaptions.config import (
    PROCESSING_SERVICE_URL,
    PUBLIC_BASE_URL,
    SUPPORTED_MEDIA_FORMATS,
)
from supacaptions.core.errors import CaptionCompileError
from supacaptions.core.style import AnimationKind, Position, TextCase
from supacaptions.server.jobs import Job, JobStatus, JobStore
from supacaptions.server.models import (
    CompileRequest,
    ErrorResponse,
    HealthResponse,
    JobCreatedResponse,
    JobResponse,
    ProcessingWebhook,
    StyleOptions,
    WebhookAck,
)

logger = logging.getLogger(__name__)

ASS_MEDIA_TYPE = "text/x-ssa"

# ---------------------------------------------------------------------------
# App and store setup
# ---------------------------------------------------------------------------

job_store = JobStore()


async def _periodic_cleanup() -> None:
    """Run job cleanup every 5 minutes."""
    while True:
        await asyncio.sleep(300)
        job_store.cleanup_expired()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start periodic cleanup on startup, cancel on shutdown."""
    task = asyncio.create_task(_periodic_cleanup())
    yield
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass


app = FastAPI(
    lifespan=lifespan,
    title="SupaCaptions API",
    description=(
        "Compile speech transcripts into styled, word-highlighted ASS "
        "subtitle tracks, and run upload-to-captioned-video jobs backed by "
        "a transcription service and a subtitle burn-in service."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _job_to_response(job: Job) -> JobResponse:
    """Convert an internal Job dataclass to a JobResponse Pydantic model."""
    return JobResponse(
        id=job.id,
        status=job.status.value,
        filename=job.filename,
        created_at=job.created_at,
        style=job.style,
        error=job.error,
        output_files=job.output_files if job.output_files else None,
        result_url=job.result_url,
        details=job.details if job.details else None,
    )


def _validate_file_extension(filename: str) -> None:
    """Raise HTTPException if the file extension is not supported."""
    ext = Path(filename).suffix.lower()
    if ext not in SUPPORTED_MEDIA_FORMATS:
        raise HTTPException(
            status_code=400,
            detail="Unsupported file type '{}'. Supported formats: {}".format(
                ext, ", ".join(sorted(SUPPORTED_MEDIA_FORMATS))
            ),
        )


def _get_job_or_404(job_id: str) -> Job:
    job = job_store.get_job(job_id)
    if job is None:
        raise HTTPException(status_code=404, detail="Job not found: {}".format(job_id))
    return job


def _infer_media_type(filename: str) -> str:
    """Infer MIME type from filename extension."""
    ext = Path(filename).suffix.lower()
    mapping = {
        ".ass": ASS_MEDIA_TYPE,
        ".srt": "application/x-subrip",
    }
    return mapping.get(ext, "application/octet-stream")


# ---------------------------------------------------------------------------
# Background pipeline
# ---------------------------------------------------------------------------


async def _run_caption_pipeline(job_id: str, store: JobStore) -> None:
    """Transcribe the uploaded video, compile captions, and submit burn-in.

    RULES:
    - Updates job status at each stage
    - Writes {stem}-transcript.srt and {stem}-captions.ass to output_dir
    - Catches all exceptions and marks the job failed with the message
    - Leaves the job in PROCESSING after submit; the webhook finishes it
    """
    job = store.get_job(job_id)
    if job is None:
        return

    stem = Path(job.filename).stem

    try:
        style = StyleOptions(**job.style).to_style_config()

        store.update_job(job_id, status=JobStatus.TRANSCRIBING)
        async with TranscriptionClient() as client:
            transcript = await client.transcribe(job.source_path)

        srt_name = "{}-transcript.srt".format(stem)
        (job.output_dir / srt_name).write_text(transcript, encoding="utf-8")

        store.update_job(job_id, status=JobStatus.COMPILING)
        captions = compile_captions(transcript, style)
        ass_name = "{}-captions.ass".format(stem)
        (job.output_dir / ass_name).write_text(captions, encoding="utf-8")
        output_files = [srt_name, ass_name]

        if not PROCESSING_SERVICE_URL:
            store.update_job(job_id, status=JobStatus.COMPLETED, output_files=output_files)
            return

        store.update_job(job_id, status=JobStatus.PROCESSING, output_files=output_files)
        request = ProcessingRequest(
            job_id=job_id,
            video_url="{}/jobs/{}/source".format(PUBLIC_BASE_URL, job_id),
            subtitles=captions,
            output_filename="{}-captioned.mp4".format(stem),
            callback_url="{}/webhooks/processing-complete?jobId={}".format(
                PUBLIC_BASE_URL, job_id
            ),
        )
        async with ProcessingClient() as processing:
            await processing.submit(request)

    except Exception as exc:
        logger.exception("Caption pipeline failed for job %s", job_id)
        store.update_job(job_id, status=JobStatus.FAILED, error=str(exc))


def _run_caption_sync(job_id: str, store: JobStore) -> None:
    """Synchronous wrapper so BackgroundTasks can run the async pipeline."""
    asyncio.run(_run_caption_pipeline(job_id, store))


# ---------------------------------------------------------------------------
# Endpoints: Captions
# ---------------------------------------------------------------------------


@app.post(
    "/captions",
    tags=["captions"],
    summary="Compile a transcript into an ASS subtitle track",
    description=(
        "Compile SRT transcript text with the given style into a complete "
        "ASS document. Word highlighting emits one event per word."
    ),
    response_class=Response,
    responses={
        200: {"content": {ASS_MEDIA_TYPE: {}}, "description": "The ASS document"},
        422: {"model": ErrorResponse, "description": "Malformed transcript or style"},
    },
)
async def create_captions(body: CompileRequest) -> Response:
    try:
        content = compile_captions(body.transcript, body.style.to_style_config())
    except CaptionCompileError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return Response(content=content, media_type=ASS_MEDIA_TYPE)


# ---------------------------------------------------------------------------
# Endpoints: Jobs
# ---------------------------------------------------------------------------


@app.post(
    "/jobs",
    response_model=JobCreatedResponse,
    status_code=201,
    tags=["jobs"],
    summary="Submit a video for captioning",
    description=(
        "Upload a video with caption style fields. Returns a job ID "
        "immediately; poll GET /jobs/{id} for status."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported file type"},
        422: {"model": ErrorResponse, "description": "Invalid style fields"},
        429: {"model": ErrorResponse, "description": "Too many concurrent jobs"},
    },
)
async def create_job(
    background_tasks: BackgroundTasks,
    video: Annotated[UploadFile, File(description="Video or audio file to caption")],
    font_family: Annotated[str, Form(description="Font family name.")] = "Arial",
    font_size: Annotated[int, Form(description="Font size in pixels.")] = 24,
    font_color: Annotated[str, Form(description="Text color as #RRGGBB.")] = "#FFFFFF",
    enable_border: Annotated[bool, Form(description="Draw a text outline.")] = False,
    border_color: Annotated[str, Form(description="Outline color as #RRGGBB.")] = "#000000",
    border_size: Annotated[int, Form(description="Outline width in pixels.")] = 2,
    enable_highlight: Annotated[bool, Form(description="Highlight the spoken word.")] = False,
    highlight_color: Annotated[str, Form(description="Highlight color as #RRGGBB.")] = "#00FF00",
    animation: Annotated[AnimationKind, Form(description="Highlight animation.")] = AnimationKind.NONE,
    text_case: Annotated[TextCase, Form(description="Text case transformation.")] = TextCase.NORMAL,
    position: Annotated[Position, Form(description="Vertical caption position.")] = Position.BOTTOM,
) -> JobCreatedResponse:
    # Sanitize filename to prevent path traversal
    filename = Path(video.filename or "upload").name
    _validate_file_extension(filename)

    try:
        style = StyleOptions(
            font_family=font_family,
            font_size=font_size,
            font_color=font_color,
            enable_border=enable_border,
            border_color=border_color,
            border_size=border_size,
            enable_highlight=enable_highlight,
            highlight_color=highlight_color,
            animation=animation,
            text_case=text_case,
            position=position,
        )
        style.to_style_config()
    except (ValidationError, CaptionCompileError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    try:
        job = job_store.create_job(filename=filename, style=style.model_dump(mode="json"))
    except ValueError as exc:
        raise HTTPException(status_code=429, detail=str(exc))

    job.source_path.write_bytes(await video.read())

    background_tasks.add_task(_run_caption_sync, job.id, job_store)

    return JobCreatedResponse(
        id=job.id,
        status=job.status.value,
        filename=job.filename,
    )


@app.get(
    "/jobs/{job_id}",
    response_model=JobResponse,
    tags=["jobs"],
    summary="Get caption job status",
    responses={404: {"model": ErrorResponse, "description": "Job not found"}},
)
async def get_job(job_id: str) -> JobResponse:
    return _job_to_response(_get_job_or_404(job_id))


@app.get(
    "/jobs/{job_id}/files/{filename}",
    tags=["jobs"],
    summary="Download a generated subtitle file",
    responses={
        400: {"model": ErrorResponse, "description": "Invalid filename"},
        404: {"model": ErrorResponse, "description": "Job or file not found"},
        409: {"model": ErrorResponse, "description": "Captions not yet compiled"},
    },
)
async def download_job_file(job_id: str, filename: str) -> Response:
    if "/" in filename or "\\" in filename or ".." in filename:
        raise HTTPException(status_code=400, detail="Invalid filename")

    job = _get_job_or_404(job_id)

    if job.status not in (JobStatus.PROCESSING, JobStatus.COMPLETED):
        raise HTTPException(
            status_code=409,
            detail="Captions are not ready (current status: {}).".format(job.status.value),
        )

    fpath = job.output_dir / filename
    if filename not in job.output_files or not fpath.exists():
        raise HTTPException(
            status_code=404,
            detail="File '{}' not found in job output files.".format(filename),
        )

    return Response(
        content=fpath.read_bytes(),
        media_type=_infer_media_type(filename),
        headers={"Content-Disposition": 'attachment; filename="{}"'.format(filename)},
    )


@app.get(
    "/jobs/{job_id}/source",
    tags=["jobs"],
    summary="Download the uploaded source video",
    description="Used by the processing service to fetch the video to caption.",
    responses={404: {"model": ErrorResponse, "description": "Job or file not found"}},
)
async def download_job_source(job_id: str) -> FileResponse:
    job = _get_job_or_404(job_id)
    if not job.source_path.exists():
        raise HTTPException(status_code=404, detail="Source file not found.")
    return FileResponse(job.source_path, filename=job.filename)


@app.delete(
    "/jobs/{job_id}",
    status_code=204,
    tags=["jobs"],
    summary="Delete a caption job and its files",
    responses={404: {"model": ErrorResponse, "description": "Job not found"}},
)
async def delete_job(job_id: str) -> Response:
    if not job_store.delete_job(job_id):
        raise HTTPException(status_code=404, detail="Job not found: {}".format(job_id))
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Endpoints: Webhooks
# ---------------------------------------------------------------------------


@app.post(
    "/webhooks/processing-complete",
    response_model=WebhookAck,
    tags=["webhooks"],
    summary="Receive a burn-in result from the processing service",
    responses={
        400: {"model": ErrorResponse, "description": "Missing job ID"},
        404: {"model": ErrorResponse, "description": "Job not found"},
        409: {"model": ErrorResponse, "description": "Job is not waiting for a result"},
    },
)
async def processing_complete(
    payload: ProcessingWebhook,
    job_id: Annotated[Optional[str], Query(alias="jobId")] = None,
) -> WebhookAck:
    if not job_id:
        raise HTTPException(status_code=400, detail="Missing job ID")

    job = _get_job_or_404(job_id)
    if job.status is not JobStatus.PROCESSING:
        raise HTTPException(
            status_code=409,
            detail="Job is not waiting for a processing result (current status: {}).".format(
                job.status.value
            ),
        )

    result = ProcessingResult.from_dict(payload.model_dump())

    if result.success:
        job_store.update_job(
            job_id,
            status=JobStatus.COMPLETED,
            result_url=result.output_url,
            details=result.details,
        )
        logger.info("Job %s completed by processing service", job_id)
    else:
        job_store.update_job(
            job_id,
            status=JobStatus.FAILED,
            error=result.error or "Unknown error",
            details=result.details,
        )
        logger.warning("Job %s failed in processing service: %s", job_id, result.error)

    return WebhookAck(success=True)


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the supacaptions-api console script."""
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
