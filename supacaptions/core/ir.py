"""Intermediate representation dataclasses for the caption compiler.

WHY: The cue parser, chunker and ASS emitter each look at the transcript
at a different granularity: whole cues, display groups of a few words,
single highlighted words. Explicit types make those stages independent.

HOW: Three frozen dataclasses form a hierarchy:
  Cue: one parsed transcript entry (index, start, end, text)
  WordGroup: up to five consecutive words of a cue with their window
  WordInterval: one word's slice of its group's window (highlight mode)

RULES:
- All times are integer centiseconds
- Cue.end_cs > Cue.start_cs is guaranteed by the parser
- Windows are half-open: [start_cs, end_cs)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class Cue:
    """A single timed entry from the source transcript.

    RULES:
    - index: the block's sequence number, informational only
    - start_cs / end_cs: centiseconds, end_cs > start_cs
    - text: one line, multi-line source text joined with single spaces
    """

    index: int
    start_cs: int
    end_cs: int
    text: str

    @property
    def duration_cs(self) -> int:
        return self.end_cs - self.start_cs


@dataclass(frozen=True)
class WordGroup:
    """A display chunk of at most five consecutive words from one cue.

    WHY: A whole cue is usually too long for a short-form video frame.
    Groups are what the viewer sees on screen at one time.

    RULES:
    - words keep their original order and are never empty strings
    - the last group of a cue may hold fewer words than the others
    - all groups of a cue share the same duration (truncated division)
    """

    words: List[str] = field(default_factory=list)
    start_cs: int = 0
    end_cs: int = 0

    @property
    def duration_cs(self) -> int:
        return self.end_cs - self.start_cs

    @property
    def text(self) -> str:
        return " ".join(self.words)


@dataclass(frozen=True)
class WordInterval:
    """One word's time slice within its WordGroup.

    index is the word's position in the group; the emitter uses it to
    decide which word of the group text gets the highlight markup.
    """

    word: str
    index: int
    start_cs: int
    end_cs: int
