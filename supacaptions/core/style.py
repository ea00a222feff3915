"""Caption style record and ASS color/alignment encoding.

WHY: Users pick caption styling in a form (font, size, colors, border,
highlight, animation, text case and position). The compiler needs those
choices as one fixed-shape, validated record, and the ASS format needs
colors and positions in its own encodings.

HOW: StyleConfig is a frozen dataclass with documented defaults; string
values for the enum fields are coerced in __post_init__. The encoders
are plain functions so the emitter can call them once per compile.

RULES:
- Colors are ``#RRGGBB`` on input, ``&H00BBGGRR`` (upper-case) on output
- Alpha is always ``00`` (opaque); it is not user-configurable
- Alignment uses the ASS numpad layout: top 8, middle 5, bottom 2
- Defaults match the upload form: Arial 24px white, green highlight,
  black 2px border (border off), bottom position
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from supacaptions.core.errors import InvalidColorFormat, InvalidStyleConfig

ASS_COLOR_PREFIX = "&H"
ASS_OPAQUE_ALPHA = "00"

_HEX_COLOR_RE = re.compile(r"#[0-9A-Fa-f]{6}")


class AnimationKind(str, Enum):
    """How the highlighted word is animated."""

    NONE = "none"
    SCALE = "scale"


class TextCase(str, Enum):
    """Case transformation applied to cue text before chunking."""

    NORMAL = "normal"
    UPPERCASE = "uppercase"


class Position(str, Enum):
    """Vertical placement of the captions on the frame."""

    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


_ALIGNMENT = {
    Position.TOP: 8,
    Position.MIDDLE: 5,
    Position.BOTTOM: 2,
}


@dataclass(frozen=True)
class StyleConfig:
    """Immutable styling options for one compilation run.

    WHY: Form fields arrive as loose strings. A typed record
    with defaults keeps the emitter free of parsing and fallback logic.

    RULES:
    - font_family: free text, but no commas or line breaks (they would
      split the ASS Style line)
    - font_size: pixels, > 0
    - border_width: only used when border_enabled, >= 0
    - highlight_color / animation: only used when highlight_enabled
    - Colors are validated when encoded, not here
    """

    font_family: str = "Arial"
    font_size: int = 24
    font_color: str = "#FFFFFF"
    border_enabled: bool = False
    border_color: str = "#000000"
    border_width: int = 2
    highlight_enabled: bool = False
    highlight_color: str = "#00FF00"
    animation: AnimationKind = AnimationKind.NONE
    text_case: TextCase = TextCase.NORMAL
    position: Position = Position.BOTTOM

    def __post_init__(self) -> None:
        # Frozen: coerce enum strings through object.__setattr__
        for name, enum_cls in (
            ("animation", AnimationKind),
            ("text_case", TextCase),
            ("position", Position),
        ):
            try:
                object.__setattr__(self, name, enum_cls(getattr(self, name)))
            except ValueError:
                raise InvalidStyleConfig(
                    "Invalid {}: {!r}".format(name, getattr(self, name))
                ) from None

        family = self.font_family.strip()
        if not family or any(ch in family for ch in ",\r\n"):
            raise InvalidStyleConfig(
                "Invalid font family: {!r}".format(self.font_family)
            )
        object.__setattr__(self, "font_family", family)

        if self.font_size <= 0:
            raise InvalidStyleConfig(
                "Font size must be positive, got {}".format(self.font_size)
            )
        if self.border_width < 0:
            raise InvalidStyleConfig(
                "Border width must not be negative, got {}".format(self.border_width)
            )


def hex_to_ass_color(value: str) -> str:
    """Convert ``#RRGGBB`` to the ASS ``&H00BBGGRR`` color token.

    Args:
        value: Seven-character hex color, case-insensitive.

    Returns:
        The ASS color with channels reversed, opaque alpha, upper-case.

    Raises:
        InvalidColorFormat: If the value is not exactly ``#`` + 6 hex digits.
    """
    if not isinstance(value, str) or not _HEX_COLOR_RE.fullmatch(value):
        raise InvalidColorFormat("Invalid color (expected #RRGGBB): {!r}".format(value))

    red, green, blue = value[1:3], value[3:5], value[5:7]
    return "{}{}{}{}{}".format(
        ASS_COLOR_PREFIX, ASS_OPAQUE_ALPHA, blue, green, red
    ).upper()


def position_alignment(position: Position) -> int:
    """Return the ASS numpad alignment code for a vertical position."""
    return _ALIGNMENT[Position(position)]
