"""ASS caption formatter for a styled, optionally word-highlighted subtitle track.

WHY: The video-processing service burns captions with an ASS-capable
renderer. ASS carries the styling (font, colors, border, position) in a
header and supports inline override tags for per-word color and scale,
which is what the highlight and scale animation options need.

HOW: A fixed header with one ``Default`` style built from StyleConfig,
then one ``Dialogue`` line per displayed interval. Without highlighting
each word group is one event. With highlighting every word of a group
gets its own event spanning only that word's interval, and each of those
events repeats the full group text with the active word wrapped in
highlight (and optionally scale) override tags.

RULES:
- Canvas 1280x720, ``Timer: 100.0000`` and ``Collisions: Normal`` are
  part of the contract with the burn-in renderer; do not change them
- Font color is used as both primary and secondary style color
- BackColour is fixed at ``&H64000000``
- Outline width is border_width when the border is enabled, else 0
- Every event text starts with ``{\\c<font color>}``
- Colors are encoded once per render and reused for every event
- Output is deterministic: same cues and style give identical bytes
"""

from __future__ import annotations

from typing import List

from supacaptions.core.chunker import build_word_groups, subdivide_group
from supacaptions.core.ir import Cue, WordGroup
from supacaptions.core.style import (
    AnimationKind,
    StyleConfig,
    hex_to_ass_color,
    position_alignment,
)
from supacaptions.core.timecode import format_ass_time
from supacaptions.formatters.base import BaseFormatter, FormatterOutput

PLAY_RES_X = 1280
PLAY_RES_Y = 720
BACK_COLOUR = "&H64000000"
HIGHLIGHT_SCALE = 120

_HEADER_TEMPLATE = """[Script Info]
ScriptType: v4.00+
Collisions: Normal
PlayResX: {play_res_x}
PlayResY: {play_res_y}
Timer: 100.0000

[V4+ Styles]
Format: Name,Fontname,Fontsize,PrimaryColour,SecondaryColour,OutlineColour,BackColour,Bold,Italic,Underline,StrikeOut,ScaleX,ScaleY,Spacing,Angle,BorderStyle,Outline,Shadow,Alignment,MarginL,MarginR,MarginV,Encoding
Style: Default,{font},{size},{font_color},{font_color},{border_color},{back_colour},0,0,0,0,100,100,0,0,1,{outline},0,{alignment},10,10,10,1

[Events]
Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
"""


class _Palette:
    """ASS-encoded colors for one render, computed once."""

    def __init__(self, style: StyleConfig) -> None:
        self.font = hex_to_ass_color(style.font_color)
        self.border = hex_to_ass_color(style.border_color)
        self.highlight = hex_to_ass_color(style.highlight_color)


def build_ass_header(style: StyleConfig) -> str:
    """Render the ``[Script Info]``, ``[V4+ Styles]`` and ``[Events]`` header."""
    palette = _Palette(style)
    return _render_header(style, palette)


def _render_header(style: StyleConfig, palette: _Palette) -> str:
    return _HEADER_TEMPLATE.format(
        play_res_x=PLAY_RES_X,
        play_res_y=PLAY_RES_Y,
        font=style.font_family,
        size=style.font_size,
        font_color=palette.font,
        border_color=palette.border,
        back_colour=BACK_COLOUR,
        outline=style.border_width if style.border_enabled else 0,
        alignment=position_alignment(style.position),
    )


def _dialogue(start_cs: int, end_cs: int, font_color: str, text: str) -> str:
    return "Dialogue: 0,{},{},Default,,0,0,0,,{{\\c{}}}{}\n".format(
        format_ass_time(start_cs), format_ass_time(end_cs), font_color, text
    )


def _highlight_word(word: str, style: StyleConfig, palette: _Palette) -> str:
    """Wrap the active word in highlight color (and scale) override tags."""
    if style.animation is AnimationKind.SCALE:
        return "{{\\fscx{s}\\fscy{s}\\c{hl}}}{w}{{\\fscx100\\fscy100\\c{fc}}}".format(
            s=HIGHLIGHT_SCALE, hl=palette.highlight, w=word, fc=palette.font
        )
    return "{{\\c{hl}}}{w}{{\\c{fc}}}".format(
        hl=palette.highlight, w=word, fc=palette.font
    )


def _group_events(group: WordGroup, style: StyleConfig, palette: _Palette) -> List[str]:
    if not style.highlight_enabled:
        return [_dialogue(group.start_cs, group.end_cs, palette.font, group.text)]

    events: List[str] = []
    for interval in subdivide_group(group):
        text = " ".join(
            _highlight_word(w, style, palette) if j == interval.index else w
            for j, w in enumerate(group.words)
        )
        events.append(_dialogue(interval.start_cs, interval.end_cs, palette.font, text))
    return events


def render_ass(cues: List[Cue], style: StyleConfig) -> str:
    """Render cues as a complete ASS document.

    Args:
        cues: Parsed cues in transcript order.
        style: Styling for the whole track.

    Returns:
        Header followed by one newline-terminated Dialogue line per
        event. Header only when there are no cues or no words.

    Raises:
        InvalidColorFormat: If any style color is not ``#RRGGBB``.
    """
    palette = _Palette(style)
    parts = [_render_header(style, palette)]
    for cue in cues:
        for group in build_word_groups(cue, style.text_case):
            parts.extend(_group_events(group, style, palette))
    return "".join(parts)


class ASSCaptionFormatter(BaseFormatter):
    """Formatter producing a single styled ``.ass`` subtitle file.

    RULES:
    - Style is fixed at construction; one instance may format many
      transcripts
    - Returns a one-element list (suffix ``-captions.ass``)
    """

    def __init__(self, style: StyleConfig | None = None) -> None:
        self.style = style or StyleConfig()

    @property
    def name(self) -> str:
        return "ASS Captions"

    def format(self, cues: List[Cue]) -> List[FormatterOutput]:
        return [
            FormatterOutput(
                suffix="-captions.ass",
                content=render_ass(cues, self.style),
                media_type="text/x-ssa",
            )
        ]
