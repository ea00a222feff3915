"""Unit tests for case normalisation, word chunking and time subdivision.

WHY: Chunk windows and word intervals decide when each caption appears.
Their integer truncation is part of the output contract with the burn-in
renderer and must not drift.

RULES:
- Concatenated groups reproduce the cue's whitespace-split words exactly
- Remainders from floor division are dropped, never redistributed
"""

import pytest

from supacaptions.core.chunker import (
    WORDS_PER_GROUP,
    build_word_groups,
    chunk_words,
    normalize_case,
    split_words,
    subdivide_group,
)
from supacaptions.core.ir import Cue, WordGroup, WordInterval
from supacaptions.core.style import TextCase


def _cue(text, start_cs=0, end_cs=200):
    return Cue(index=1, start_cs=start_cs, end_cs=end_cs, text=text)


class TestNormalizeCase:

    def test_normal_passes_through(self):
        assert normalize_case("Hello World", TextCase.NORMAL) == "Hello World"

    def test_uppercase(self):
        assert normalize_case("Hello World", TextCase.UPPERCASE) == "HELLO WORLD"

    def test_accepts_string_value(self):
        assert normalize_case("abc", "uppercase") == "ABC"


class TestSplitAndChunk:

    def test_split_discards_empty_tokens(self):
        assert split_words("  a   b\tc  ") == ["a", "b", "c"]

    def test_split_empty(self):
        assert split_words("   ") == []

    def test_group_size_is_five(self):
        assert WORDS_PER_GROUP == 5

    def test_chunk_sizes(self):
        words = [str(i) for i in range(12)]
        assert [len(c) for c in chunk_words(words)] == [5, 5, 2]

    def test_exact_multiple(self):
        assert [len(c) for c in chunk_words(list("abcdefghij"))] == [5, 5]

    @pytest.mark.parametrize("count", [1, 4, 5, 6, 11, 23])
    def test_chunks_reconstruct_word_sequence(self, count):
        words = ["w{}".format(i) for i in range(count)]
        chunks = chunk_words(words)
        assert [w for c in chunks for w in c] == words
        assert all(1 <= len(c) <= 5 for c in chunks)


class TestBuildWordGroups:
    """build_word_groups() splits a cue into evenly timed groups."""

    def test_single_group_spans_cue(self):
        groups = build_word_groups(_cue("Hello world"))
        assert groups == [WordGroup(words=["Hello", "world"], start_cs=0, end_cs=200)]

    def test_seven_words_make_two_groups(self):
        groups = build_word_groups(_cue("a b c d e f g", 0, 301))
        assert [g.words for g in groups] == [["a", "b", "c", "d", "e"], ["f", "g"]]
        # 301 // 2 == 150; the last centisecond is dropped
        assert [(g.start_cs, g.end_cs) for g in groups] == [(0, 150), (150, 300)]

    def test_windows_offset_from_cue_start(self):
        groups = build_word_groups(_cue("a b c d e f g h i j k", 1000, 1300))
        assert [(g.start_cs, g.end_cs) for g in groups] == [
            (1000, 1100), (1100, 1200), (1200, 1300),
        ]

    def test_empty_cue_has_no_groups(self):
        assert build_word_groups(_cue("")) == []

    def test_uppercase_applied_before_split(self):
        groups = build_word_groups(_cue("hello world"), TextCase.UPPERCASE)
        assert groups[0].words == ["HELLO", "WORLD"]

    def test_group_text(self):
        assert build_word_groups(_cue("a  b   c"))[0].text == "a b c"


class TestSubdivideGroup:
    """subdivide_group() slices a group's window per word."""

    def test_even_split(self):
        group = WordGroup(words=["Hello", "world"], start_cs=0, end_cs=200)
        assert subdivide_group(group) == [
            WordInterval(word="Hello", index=0, start_cs=0, end_cs=100),
            WordInterval(word="world", index=1, start_cs=100, end_cs=200),
        ]

    def test_remainder_dropped(self):
        group = WordGroup(words=["a", "b", "c"], start_cs=50, end_cs=150)
        assert [(i.start_cs, i.end_cs) for i in subdivide_group(group)] == [
            (50, 83), (83, 116), (116, 149),
        ]

    def test_one_interval_per_word(self):
        group = WordGroup(words=list("abcde"), start_cs=0, end_cs=150)
        intervals = subdivide_group(group)
        assert [i.index for i in intervals] == [0, 1, 2, 3, 4]
        assert all(i.end_cs - i.start_cs == 30 for i in intervals)
