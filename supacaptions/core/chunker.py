"""Case normalisation, word chunking and per-word time subdivision.

WHY: A transcription cue can hold a whole sentence spoken over several
seconds. Short-form captions show at most a handful of words at once and,
in highlight mode, mark the word currently being spoken. Neither the cue
nor its words carry finer timing, so the cue window is divided evenly.

HOW: Cue text is optionally upper-cased, split on whitespace, and cut
into groups of WORDS_PER_GROUP words. The cue duration is divided by the
group count; in highlight mode each group duration is divided again by
its word count.

RULES:
- Group and word durations use floor division; the remainder is dropped,
  so the last group/word may end a few centiseconds early
- A cue with no words produces no groups
- Group windows are back-to-back from the cue start
"""

from __future__ import annotations

from typing import List

from supacaptions.core.ir import Cue, WordGroup, WordInterval
from supacaptions.core.style import TextCase

WORDS_PER_GROUP = 5


def normalize_case(text: str, text_case: TextCase) -> str:
    """Apply the configured text case to a cue's text."""
    if TextCase(text_case) is TextCase.UPPERCASE:
        return text.upper()
    return text


def split_words(text: str) -> List[str]:
    """Split text on any whitespace, dropping empty tokens."""
    return text.split()


def chunk_words(words: List[str], size: int = WORDS_PER_GROUP) -> List[List[str]]:
    """Partition words into consecutive chunks of at most ``size`` words."""
    return [words[i:i + size] for i in range(0, len(words), size)]


def build_word_groups(
    cue: Cue,
    text_case: TextCase = TextCase.NORMAL,
    size: int = WORDS_PER_GROUP,
) -> List[WordGroup]:
    """Split a cue into timed display groups.

    Args:
        cue: The parsed cue.
        text_case: Case transformation applied before splitting.
        size: Maximum words per group.

    Returns:
        Groups in order; group k spans
        ``[start + k*d, start + (k+1)*d)`` with ``d = duration // count``.
    """
    chunks = chunk_words(split_words(normalize_case(cue.text, text_case)), size)
    if not chunks:
        return []

    group_duration = cue.duration_cs // len(chunks)
    groups: List[WordGroup] = []
    for k, chunk in enumerate(chunks):
        start_cs = cue.start_cs + k * group_duration
        groups.append(WordGroup(
            words=chunk,
            start_cs=start_cs,
            end_cs=start_cs + group_duration,
        ))
    return groups


def subdivide_group(group: WordGroup) -> List[WordInterval]:
    """Divide a group's window evenly among its words (highlight mode)."""
    word_duration = group.duration_cs // len(group.words)
    intervals: List[WordInterval] = []
    for idx, word in enumerate(group.words):
        start_cs = group.start_cs + idx * word_duration
        intervals.append(WordInterval(
            word=word,
            index=idx,
            start_cs=start_cs,
            end_cs=start_cs + word_duration,
        ))
    return intervals
