"""Transcript-to-ASS caption compiler entry point.

WHY: Every front end does the same thing with a transcript: parse it and
render it with the user's style. One function keeps that sequence (and
its error behaviour) identical for the CLI, the HTTP API and tests.

HOW: parse_cues() → ASSCaptionFormatter.format(). The parser raises on a
malformed time range, the formatter on a malformed color; either aborts
the call before any output is returned.

RULES:
- Pure and synchronous: no I/O, no shared state, safe to call concurrently
- An empty transcript yields the header alone
- style=None means StyleConfig() defaults
"""

from __future__ import annotations

import logging
from typing import Optional

from supacaptions.core.cue_parser import parse_cues
from supacaptions.core.style import StyleConfig
from supacaptions.formatters.ass_captions import ASSCaptionFormatter

logger = logging.getLogger(__name__)


def compile_captions(transcript: str, style: Optional[StyleConfig] = None) -> str:
    """Compile SRT transcript text into a styled ASS subtitle document.

    Args:
        transcript: Raw SRT text from the transcription service.
        style: Caption styling; defaults to StyleConfig().

    Returns:
        The complete ASS document.

    Raises:
        MalformedTimeRange: If a cue's time range cannot be parsed.
        InvalidColorFormat: If a style color is not ``#RRGGBB``.
    """
    cues = parse_cues(transcript)
    output = ASSCaptionFormatter(style).format(cues)[0]
    logger.debug("Compiled %d cues into %d bytes of ASS", len(cues), len(output.content))
    return output.content
