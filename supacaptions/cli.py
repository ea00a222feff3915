"""Command-line interface for the caption compiler.

WHY: Editors want to caption a clip or restyle an existing transcript
from the terminal without running the HTTP server.

HOW: Uses argparse for the input path and every style option. An ``.srt``
input is compiled directly. A supported media file is first sent to the
transcription service (asyncio.run around TranscriptionClient) and its
SRT is saved next to the captions. Status messages go to stderr.

RULES:
- Positional argument: input .srt or audio/video file
- Output naming: {stem}-captions.ass, numeric suffix on conflict
  ({stem}-captions-2.ass)
- Errors print ``Error: ...`` to stderr and exit with status 1
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

import httpx

from supacaptions.api.client import ServiceAPIError, TranscriptionClient
from supacaptions.compiler import compile_captions
from supacaptions.config import SUPPORTED_MEDIA_FORMATS, TRANSCRIPT_FORMATS
from supacaptions.core.errors import CaptionCompileError
from supacaptions.core.style import AnimationKind, Position, StyleConfig, TextCase
from supacaptions.formatters.base import FormatterOutput


def _status(msg: str) -> None:
    """Print a status message to stderr so stdout stays pipeable."""
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> NoReturn:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Return a path for {stem}{suffix} that does not exist yet.

    RULES:
    - First attempt: {stem}{suffix} (e.g. clip-captions.ass)
    - Conflict: insert a counter before the extension, starting at 2
      (e.g. clip-captions-2.ass)
    """
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name, suffix_ext = suffix[:dot_idx], suffix[dot_idx:]
    else:
        suffix_name, suffix_ext = suffix, ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    """Write one formatter output as UTF-8 and return its path."""
    path = _resolve_output_path(stem, output.suffix, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _style_from_args(args: argparse.Namespace) -> StyleConfig:
    return StyleConfig(
        font_family=args.font_family,
        font_size=args.font_size,
        font_color=args.font_color,
        border_enabled=args.border,
        border_color=args.border_color,
        border_width=args.border_width,
        highlight_enabled=args.highlight,
        highlight_color=args.highlight_color,
        animation=args.animation,
        text_case=args.text_case,
        position=args.position,
    )


async def _transcribe(input_path: Path) -> str:
    async with TranscriptionClient() as client:
        return await client.transcribe(input_path, on_status=_status)


def run(args: argparse.Namespace) -> Path:
    """Compile (and if needed transcribe) the input; return the .ass path."""
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        _fail("File not found: {}".format(input_path))

    ext = input_path.suffix.lower()
    if ext not in TRANSCRIPT_FORMATS | SUPPORTED_MEDIA_FORMATS:
        _fail("Unsupported file type '{}'. Supported formats: {}".format(
            ext, ", ".join(sorted(TRANSCRIPT_FORMATS | SUPPORTED_MEDIA_FORMATS))
        ))

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    stem = input_path.stem

    try:
        style = _style_from_args(args)

        if ext in TRANSCRIPT_FORMATS:
            transcript = input_path.read_text(encoding="utf-8")
        else:
            transcript = asyncio.run(_transcribe(input_path))
            srt_path = _save_output(
                FormatterOutput(
                    suffix="-transcript.srt",
                    content=transcript,
                    media_type="application/x-subrip",
                ),
                stem,
                output_dir,
            )
            _status("  Saved transcript: {}".format(srt_path))

        captions = compile_captions(transcript, style)
    except (CaptionCompileError, ServiceAPIError, httpx.HTTPError, ValueError) as e:
        _fail(str(e))

    path = _save_output(
        FormatterOutput(suffix="-captions.ass", content=captions, media_type="text/x-ssa"),
        stem,
        output_dir,
    )
    _status("  Saved captions: {}".format(path))
    return path


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    defaults = StyleConfig()
    parser = argparse.ArgumentParser(
        prog="supacaptions",
        description="Compile an SRT transcript (or transcribe a video first) into "
                    "a styled ASS subtitle track with optional word highlighting.",
    )

    parser.add_argument(
        "input_file",
        help="Path to an .srt transcript or an audio/video file to transcribe.",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save output files (default: same as input file).",
    )

    style = parser.add_argument_group("caption style")
    style.add_argument("--font-family", default=defaults.font_family,
                       help="Font family name (default: %(default)s).")
    style.add_argument("--font-size", type=int, default=defaults.font_size,
                       help="Font size in pixels (default: %(default)s).")
    style.add_argument("--font-color", default=defaults.font_color,
                       help="Text color as #RRGGBB (default: %(default)s).")
    style.add_argument("--border", action=argparse.BooleanOptionalAction,
                       default=defaults.border_enabled,
                       help="Draw a text outline (default: %(default)s).")
    style.add_argument("--border-color", default=defaults.border_color,
                       help="Outline color as #RRGGBB (default: %(default)s).")
    style.add_argument("--border-width", type=int, default=defaults.border_width,
                       help="Outline width in pixels (default: %(default)s).")
    style.add_argument("--highlight", action=argparse.BooleanOptionalAction,
                       default=defaults.highlight_enabled,
                       help="Highlight the word being spoken (default: %(default)s).")
    style.add_argument("--highlight-color", default=defaults.highlight_color,
                       help="Highlight color as #RRGGBB (default: %(default)s).")
    style.add_argument("--animation", choices=[a.value for a in AnimationKind],
                       default=defaults.animation.value,
                       help="Highlighted-word animation (default: %(default)s).")
    style.add_argument("--text-case", choices=[c.value for c in TextCase],
                       default=defaults.text_case.value,
                       help="Text case transformation (default: %(default)s).")
    style.add_argument("--position", choices=[p.value for p in Position],
                       default=defaults.position.value,
                       help="Vertical caption position (default: %(default)s).")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI; explicit argv is for testing."""
    parser = build_parser()
    args = parser.parse_args(argv)
    run(args)


if __name__ == "__main__":
    main()
