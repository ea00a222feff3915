"""Processing-service request and result dataclasses.

WHY: The video-processing service takes a JSON job description and later
reports completion through a webhook. Typed dataclasses make both shapes
explicit and keep the camelCase wire names in one place.

HOW: ProcessingRequest.to_dict() builds the POST body; ProcessingResult
.from_dict() parses the webhook body.

RULES:
- Wire keys are camelCase (jobId, videoUrl, ...), Python fields snake_case
- subtitles carries the complete ASS document inline
- A webhook without "success": true is treated as a failure
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class ProcessingRequest:
    """A burn-in job for the external processing service.

    RULES:
    - video_url: where the service downloads the source video
    - callback_url: the webhook the service POSTs its result to
    - output_filename: suggested name for the captioned video
    """

    job_id: str
    video_url: str
    subtitles: str
    output_filename: str
    callback_url: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jobId": self.job_id,
            "videoUrl": self.video_url,
            "subtitles": self.subtitles,
            "outputFilename": self.output_filename,
            "callbackUrl": self.callback_url,
        }


@dataclass
class ProcessingResult:
    """Completion report sent by the processing service to the webhook."""

    success: bool
    error: Optional[str] = None
    output_url: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ProcessingResult:
        """Parse a webhook body, tolerating missing optional keys."""
        return cls(
            success=data.get("success") is True,
            error=data.get("error"),
            output_url=data.get("outputUrl"),
            details=data.get("processingDetails") or {},
        )
