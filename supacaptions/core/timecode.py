"""Timestamp conversion between SRT time strings, centiseconds and ASS time.

WHY: SRT timestamps carry milliseconds (``00:01:02,345``) while ASS works
in centiseconds (``0:01:02.34``). Doing the arithmetic on floats drifts
(``1.15 * 100 == 114.999…``), so everything is kept as integers.

HOW: parse_timestamp() splits the string into its digit groups and builds
the centisecond count with integer arithmetic, flooring any digits past
the second decimal place. format_ass_time() is the inverse.

RULES:
- Comma and dot are both accepted as the fractional separator
- Hours may have any number of digits; minutes and seconds one or two
- parse result is the exact floor of the written value in centiseconds.
  A float formula (seconds * 100, then floor) can land 1 cs lower on
  values such as ``00:00:01,150``: this module gives 115 where the float
  result is 114. Times therefore never come out earlier than written.
- ASS output: hours unpadded, minutes 2 digits, seconds as ``SS.ff``
"""

from __future__ import annotations

import re

from supacaptions.core.errors import MalformedTimeRange

CS_PER_SECOND = 100
CS_PER_MINUTE = 60 * CS_PER_SECOND
CS_PER_HOUR = 60 * CS_PER_MINUTE

_TIMESTAMP_RE = re.compile(r"^(\d+):(\d{1,2}):(\d{1,2})(?:[.,](\d+))?$")


def parse_timestamp(value: str) -> int:
    """Convert an ``HH:MM:SS[.,]fff`` string to integer centiseconds.

    Args:
        value: Timestamp from an SRT time-range line.

    Returns:
        ``hours*360000 + minutes*6000 + seconds*100``, floored.

    Raises:
        MalformedTimeRange: If the string is not a timestamp.
    """
    match = _TIMESTAMP_RE.match(value.strip())
    if match is None:
        raise MalformedTimeRange("Invalid timestamp: {!r}".format(value))

    hours, minutes, seconds, fraction = match.groups()
    # Only the first two fractional digits survive the floor
    centis = int((fraction or "").ljust(2, "0")[:2])

    return (
        int(hours) * CS_PER_HOUR
        + int(minutes) * CS_PER_MINUTE
        + int(seconds) * CS_PER_SECOND
        + centis
    )


def format_ass_time(centiseconds: int) -> str:
    """Format centiseconds as an ASS event timestamp, e.g. ``0:00:01.50``."""
    if centiseconds < 0:
        raise ValueError("Negative time: {}".format(centiseconds))

    hours, rest = divmod(centiseconds, CS_PER_HOUR)
    minutes, rest = divmod(rest, CS_PER_MINUTE)
    seconds, centis = divmod(rest, CS_PER_SECOND)
    return "{}:{:02d}:{:02d}.{:02d}".format(hours, minutes, seconds, centis)
