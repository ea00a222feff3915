"""Shared test fixtures for the supacaptions test suite.

WHY: Parser, formatter, API and CLI tests all need the same sample
transcripts and style presets. Centralizing them keeps expected values
in one place.

HOW: Module-level constants hold SRT text and the expected ASS color
tokens; pytest fixtures hand out StyleConfig presets.

RULES:
- SAMPLE_SRT matches what the transcription service returns for a short clip
- Expected strings are literal, never rebuilt with the code under test
"""

import pytest

from supacaptions.core.style import StyleConfig

HELLO_SRT = "1\n00:00:00,000 --> 00:00:02,000\nHello world\n\n"

SAMPLE_SRT = (
    "1\n"
    "00:00:00,000 --> 00:00:03,010\n"
    "one two three four five\n"
    "six seven\n"
    "\n"
    "2\n"
    "00:00:03,500 --> 00:00:05,000\n"
    "Thanks for watching\n"
    "\n"
)

WHITE = "&H00FFFFFF"
GREEN = "&H0000FF00"
BLACK = "&H00000000"


@pytest.fixture
def hello_srt():
    return HELLO_SRT


@pytest.fixture
def sample_srt():
    return SAMPLE_SRT


@pytest.fixture
def default_style():
    return StyleConfig()


@pytest.fixture
def highlight_style():
    return StyleConfig(highlight_enabled=True)


@pytest.fixture
def scale_style():
    return StyleConfig(highlight_enabled=True, animation="scale")
