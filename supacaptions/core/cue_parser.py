"""Cue parser for SRT-style timed-text transcripts.

WHY: The transcription service returns its result as SRT text: blocks of
an index line, a time-range line and one or more text lines. The compiler
needs those blocks as typed Cue records with integer times.

HOW: A single forward pass over the lines. At each position where a block
may start, the line must be a bare number; anything else (blank lines,
stray whitespace, a WEBVTT-like preamble) is skipped. After an index line
the next line is the time range, then text lines run until a blank line.

RULES:
- Multi-line cue text is joined with single spaces and trimmed
- A time-range line that does not split into two timestamps raises
  MalformedTimeRange and aborts the parse
- end <= start is clamped to end = start + 1 (never a zero-length cue)
- An index line at end of input stops the parse without error
- A time range followed by no text yields a cue with empty text
"""

from __future__ import annotations

import re
from typing import List, Tuple

from supacaptions.core.errors import MalformedTimeRange
from supacaptions.core.ir import Cue
from supacaptions.core.timecode import parse_timestamp

_INDEX_RE = re.compile(r"^\d+$")
_ARROW_RE = re.compile(r"\s*-->\s*")


def parse_time_range(line: str) -> Tuple[int, int]:
    """Parse ``start --> end`` into a (start_cs, end_cs) tuple.

    Raises:
        MalformedTimeRange: If the line does not hold exactly two timestamps.
    """
    parts = _ARROW_RE.split(line.strip())
    if len(parts) != 2:
        raise MalformedTimeRange("Invalid time range: {!r}".format(line))
    return parse_timestamp(parts[0]), parse_timestamp(parts[1])


def parse_cues(content: str) -> List[Cue]:
    """Parse SRT transcript text into an ordered list of cues.

    Args:
        content: The raw transcript text.

    Returns:
        Cues in input order. Empty list for input with no cue blocks.

    Raises:
        MalformedTimeRange: If a block's time-range line cannot be parsed.
    """
    lines = content.lstrip("\ufeff").splitlines()
    cues: List[Cue] = []
    i = 0

    while i < len(lines):
        index_line = lines[i].strip()
        i += 1
        if not _INDEX_RE.match(index_line):
            continue
        if i >= len(lines):
            break

        start_cs, end_cs = parse_time_range(lines[i])
        i += 1

        text_lines: List[str] = []
        while i < len(lines) and lines[i].strip():
            text_lines.append(lines[i].strip())
            i += 1

        cues.append(Cue(
            index=int(index_line),
            start_cs=start_cs,
            end_cs=max(end_cs, start_cs + 1),
            text=" ".join(text_lines),
        ))

    return cues
