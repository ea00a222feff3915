"""Typed errors raised by the caption compiler.

WHY: Callers (HTTP handlers, CLI) need to tell bad input apart from bugs
and service failures, and report it to the user as such.

HOW: One base class derived from ValueError, one subclass per input
problem. The compiler never recovers from these; they abort the whole
compile call so no partial subtitle track is ever produced.

RULES:
- An empty transcript is NOT an error (header-only output)
- Messages quote the offending value
"""


class CaptionCompileError(ValueError):
    """Base class for all caption compiler input errors."""


class MalformedTimeRange(CaptionCompileError):
    """A cue's time-range line is not ``HH:MM:SS[.,]fff --> HH:MM:SS[.,]fff``."""


class InvalidColorFormat(CaptionCompileError):
    """A color value is not a ``#RRGGBB`` hex string."""


class InvalidStyleConfig(CaptionCompileError):
    """A style field would produce a broken ASS style line."""
