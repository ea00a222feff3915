"""Pydantic request/response models for the HTTP API.

WHY: The FastAPI endpoints need typed schemas for request validation,
response serialization, and automatic OpenAPI documentation.

HOW: StyleOptions mirrors the core StyleConfig with field constraints
that reject bad input with a 422 before the compiler runs, and converts
to StyleConfig via to_style_config(). The remaining models describe job
and webhook payloads.

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Enum fields reuse the core enums so values stay in one place
- Webhook fields keep the processing service's camelCase names
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from supacaptions.core.style import AnimationKind, Position, StyleConfig, TextCase

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class StyleOptions(BaseModel):
    """Caption styling chosen by the user.

    RULES:
    - Defaults match StyleConfig defaults
    - highlight_color and animation only matter when enable_highlight is set
    - border_color and border_size only matter when enable_border is set
    """

    font_family: str = Field(
        default="Arial",
        min_length=1,
        max_length=100,
        pattern=r"^[^,\r\n]+$",
        description="Font family name (no commas).",
    )
    font_size: int = Field(default=24, gt=0, le=400, description="Font size in pixels.")
    font_color: str = Field(default="#FFFFFF", pattern=HEX_COLOR_PATTERN, description="Text color as #RRGGBB.")
    enable_border: bool = Field(default=False, description="Draw an outline around the text.")
    border_color: str = Field(default="#000000", pattern=HEX_COLOR_PATTERN, description="Outline color as #RRGGBB.")
    border_size: int = Field(default=2, ge=0, le=50, description="Outline width in pixels.")
    enable_highlight: bool = Field(default=False, description="Highlight the word being spoken.")
    highlight_color: str = Field(default="#00FF00", pattern=HEX_COLOR_PATTERN, description="Highlight color as #RRGGBB.")
    animation: AnimationKind = Field(default=AnimationKind.NONE, description="Highlighted-word animation.")
    text_case: TextCase = Field(default=TextCase.NORMAL, description="Text case transformation.")
    position: Position = Field(default=Position.BOTTOM, description="Vertical caption position.")

    def to_style_config(self) -> StyleConfig:
        return StyleConfig(
            font_family=self.font_family,
            font_size=self.font_size,
            font_color=self.font_color,
            border_enabled=self.enable_border,
            border_color=self.border_color,
            border_width=self.border_size,
            highlight_enabled=self.enable_highlight,
            highlight_color=self.highlight_color,
            animation=self.animation,
            text_case=self.text_case,
            position=self.position,
        )


class CompileRequest(BaseModel):
    """Body of POST /captions."""

    transcript: str = Field(description="SRT transcript text to compile.")
    style: StyleOptions = Field(default_factory=StyleOptions, description="Caption styling.")


class ProcessingWebhook(BaseModel):
    """Completion report POSTed by the processing service."""

    success: bool = Field(default=False, description="Whether burn-in succeeded.")
    error: Optional[str] = Field(default=None, description="Failure reason when success is false.")
    outputUrl: Optional[str] = Field(default=None, description="URL of the captioned video.")
    processingDetails: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Free-form details reported by the service.",
    )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class JobCreatedResponse(BaseModel):
    """Response returned when a new caption job is submitted."""

    id: str = Field(description="Unique job identifier for polling status.")
    status: str = Field(description="Initial job status (always 'pending').")
    filename: str = Field(description="Uploaded filename.")


class JobResponse(BaseModel):
    """Caption job status response.

    RULES:
    - error is only set when status is 'failed'
    - output_files is only populated once the subtitle track exists
    - result_url is only set after a successful processing webhook
    """

    id: str = Field(description="Unique job identifier.")
    status: str = Field(description="Current job status.")
    filename: str = Field(description="Uploaded filename.")
    created_at: float = Field(description="Job creation timestamp (Unix epoch seconds).")
    style: Dict[str, Any] = Field(description="Style options used for this job.")
    error: Optional[str] = Field(default=None, description="Error message when failed.")
    output_files: Optional[List[str]] = Field(default=None, description="Generated files available for download.")
    result_url: Optional[str] = Field(default=None, description="Captioned video URL when completed.")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Processing details from the service.")


class WebhookAck(BaseModel):
    """Acknowledgement returned to the processing service."""

    success: bool = Field(description="Always true when the update was applied.")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
