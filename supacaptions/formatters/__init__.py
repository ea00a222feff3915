"""Subtitle output formatters.

WHY: Parsed cues can be written in more than one subtitle syntax. Each
formatter subclasses BaseFormatter so the front ends save and serve the
result (suffix, content, MIME type) without format-specific code.
"""

from supacaptions.formatters.ass_captions import ASSCaptionFormatter
from supacaptions.formatters.base import BaseFormatter, FormatterOutput

__all__ = ["ASSCaptionFormatter", "BaseFormatter", "FormatterOutput"]
