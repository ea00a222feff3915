"""In-memory job store for caption jobs with TTL cleanup.

WHY: Captioning a video takes a transcription round-trip plus a burn-in
run on the processing service, which can take minutes. The API returns a
job ID immediately and tracks the work here so clients (and the
processing webhook) can refer to it later.

HOW: Three components work together:
  JobStatus: enum of valid job states
  Job: dataclass holding job metadata, status, and working directory
  JobStore: thread-safe dict-based store with create/update/get/list/delete
               and TTL cleanup

RULES:
- All store mutations are protected by threading.Lock
- Each job gets a dedicated temp directory for its upload and outputs
- TTL-based expiry removes stale jobs and their temp directories
- Job IDs are UUID4 hex strings generated at creation time
- Default TTL is 1 hour (3600 seconds)
- Jobs that stay non-terminal past the processing timeout (default 2 hours
  since their last update) are failed by cleanup_expired() and then expire
  like any other failed job
"""

from __future__ import annotations

import enum
import logging
import shutil
import tempfile
import threading
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

# Default time-to-live for completed/failed jobs (seconds)
DEFAULT_TTL_SECONDS = 3600

# Longest a job may sit without a status update (e.g. waiting for the
# processing webhook) before cleanup fails it
DEFAULT_PROCESSING_TIMEOUT_SECONDS = 7200

PROCESSING_TIMEOUT_ERROR = "Processing timed out"

TERMINAL_STATUSES = frozenset({"completed", "failed"})


class JobStatus(str, enum.Enum):
    """Valid states for a caption job.

    RULES:
    - pending: job created, not yet started
    - transcribing: media file sent to the transcription service
    - compiling: SRT received, ASS track being built
    - processing: burn-in submitted, waiting for the webhook
    - completed: captions (and captioned video, if any) ready
    - failed: unrecoverable error at any stage
    """

    PENDING = "pending"
    TRANSCRIBING = "transcribing"
    COMPILING = "compiling"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self.value in TERMINAL_STATUSES


@dataclass
class Job:
    """Metadata and state for a single caption job.

    RULES:
    - id: UUID4 hex string, unique and immutable after creation
    - filename: sanitized upload filename, stored inside output_dir
    - style: the style fields submitted with the upload
    - output_files: generated files available for download
    - result_url: captioned video URL reported by the processing service
    - details: free-form processing details from the webhook
    """

    id: str
    status: JobStatus
    filename: str
    output_dir: Path
    created_at: float
    updated_at: float
    completed_at: Optional[float] = None
    error: Optional[str] = None
    style: Dict[str, Any] = field(default_factory=dict)
    output_files: List[str] = field(default_factory=list)
    result_url: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def source_path(self) -> Path:
        return self.output_dir / self.filename


class JobStore:
    """Thread-safe in-memory store for caption jobs.

    WHY: API requests, background pipeline tasks and the processing
    webhook all touch job state concurrently.

    RULES:
    - All public methods that mutate state acquire self._lock
    - get_job() returns None for missing job IDs (no exceptions)
    - create_job() raises ValueError once max_jobs are stored
    """

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        max_jobs: int = 100,
        processing_timeout_seconds: int = DEFAULT_PROCESSING_TIMEOUT_SECONDS,
    ) -> None:
        self._jobs: Dict[str, Job] = {}
        self._lock = threading.Lock()
        self._ttl_seconds = ttl_seconds
        self._processing_timeout_seconds = processing_timeout_seconds
        self.max_jobs = max_jobs

    def create_job(
        self,
        filename: str,
        style: Optional[Dict[str, Any]] = None,
    ) -> Job:
        """Create a new job in PENDING state with a dedicated temp directory."""
        with self._lock:
            if len(self._jobs) >= self.max_jobs:
                raise ValueError(
                    "Maximum number of concurrent jobs ({}) reached".format(
                        self.max_jobs
                    )
                )

            job_id = uuid.uuid4().hex
            now = time.time()
            output_dir = Path(tempfile.mkdtemp(prefix="supacaptions_job_"))

            job = Job(
                id=job_id,
                status=JobStatus.PENDING,
                filename=filename,
                output_dir=output_dir,
                created_at=now,
                updated_at=now,
                style=style or {},
            )

            self._jobs[job_id] = job

        logger.info("Created job %s for file %s", job_id, filename)
        return job

    def get_job(self, job_id: str) -> Optional[Job]:
        """Retrieve a job by ID, or None if not found."""
        with self._lock:
            return self._jobs.get(job_id)

    def list_jobs(self) -> List[Job]:
        """Return all jobs, oldest first."""
        with self._lock:
            return sorted(self._jobs.values(), key=lambda j: j.created_at)

    def update_job(
        self,
        job_id: str,
        status: Optional[JobStatus] = None,
        error: Optional[str] = None,
        output_files: Optional[List[str]] = None,
        result_url: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> Optional[Job]:
        """Update a job's mutable fields.

        RULES:
        - Returns the updated Job, or None if job_id not found
        - Only non-None arguments are applied
        - updated_at is always bumped
        - completed_at is set when status becomes COMPLETED or FAILED and
          cleared when it moves back to a non-terminal status
        """
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                return None

            now = time.time()

            if status is not None:
                job.status = status
            if error is not None:
                job.error = error
            if output_files is not None:
                job.output_files = output_files
            if result_url is not None:
                job.result_url = result_url
            if details is not None:
                job.details = details

            job.updated_at = now

            if job.status.is_terminal:
                job.completed_at = now
            else:
                job.completed_at = None

            return job

    def delete_job(self, job_id: str) -> bool:
        """Delete a job and its temp directory. False if it did not exist."""
        with self._lock:
            job = self._jobs.pop(job_id, None)

        if job is None:
            return False

        self._cleanup_output_dir(job.output_dir)
        logger.info("Deleted job %s", job_id)
        return True

    def cleanup_expired(self) -> int:
        """Fail timed-out jobs, then remove terminal jobs older than the TTL.

        RULES:
        - A non-terminal job whose updated_at is older than the processing
          timeout becomes FAILED with PROCESSING_TIMEOUT_ERROR
        - Its completed_at is the moment the timeout ran out, so a job
          stuck for longer than timeout + TTL is removed in the same pass

        Returns the count of removed jobs.
        """
        now = time.time()
        expired_jobs: List[Job] = []

        with self._lock:
            for job_id, job in list(self._jobs.items()):
                deadline = job.updated_at + self._processing_timeout_seconds
                if not job.status.is_terminal and now > deadline:
                    logger.warning(
                        "Job %s timed out in status %s", job_id, job.status.value
                    )
                    job.status = JobStatus.FAILED
                    job.error = PROCESSING_TIMEOUT_ERROR
                    job.updated_at = now
                    job.completed_at = deadline
                if not job.status.is_terminal or job.completed_at is None:
                    continue
                if now - job.completed_at > self._ttl_seconds:
                    expired_jobs.append(self._jobs.pop(job_id))

        for job in expired_jobs:
            self._cleanup_output_dir(job.output_dir)
            logger.info("Expired job %s (completed %.0fs ago)", job.id, now - job.completed_at)

        return len(expired_jobs)

    @staticmethod
    def _cleanup_output_dir(output_dir: Path) -> None:
        """Remove a job's temp directory tree; logs instead of raising."""
        if output_dir.exists():
            try:
                shutil.rmtree(output_dir)
            except OSError:
                logger.warning("Failed to clean up temp dir: %s", output_dir)
