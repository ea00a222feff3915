"""Abstract base formatter and output container.

WHY: The CLI and the HTTP API both turn parsed cues into a file they save
or serve. A shared interface lets them handle the output (name, suffix,
MIME type) without knowing which subtitle format produced it.

HOW: BaseFormatter is an ABC with two requirements: a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list so a format may produce several files
- ``suffix`` starts with a hyphen, e.g. ``"-captions.ass"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from supacaptions.core.ir import Cue


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-captions.ass"`` → ``"clip-captions.ass"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"text/x-ssa"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for subtitle output formatters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'ASS Captions'."""

    @abstractmethod
    def format(self, cues: List[Cue]) -> List[FormatterOutput]:
        """Convert parsed cues into one or more output files.

        Args:
            cues: Cues in transcript order, as returned by parse_cues().

        Returns:
            List of FormatterOutput objects.
        """
