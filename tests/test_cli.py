"""Tests for the command-line interface.

HOW: main() is called with an explicit argv. Media inputs use a fake
TranscriptionClient patched into supacaptions.cli, so no network call
is made. Failures are observed as SystemExit(1) plus stderr text.
"""

from __future__ import annotations

import pytest

from supacaptions import cli
from supacaptions.api.client import TranscriptionAPIError


class _FakeTranscriptionClient:
    transcript = ""
    error = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return None

    async def transcribe(self, file_path, on_status=None):
        if on_status:
            on_status("Transcribing {}...".format(file_path.name))
        if self.error is not None:
            raise self.error
        return self.transcript


@pytest.fixture
def fake_transcription(monkeypatch, hello_srt):
    _FakeTranscriptionClient.transcript = hello_srt
    _FakeTranscriptionClient.error = None
    monkeypatch.setattr(cli, "TranscriptionClient", _FakeTranscriptionClient)
    return _FakeTranscriptionClient


class TestCompileTranscript:

    def test_writes_captions_next_to_input(self, tmp_path, hello_srt, capsys):
        srt = tmp_path / "clip.srt"
        srt.write_text(hello_srt, encoding="utf-8")

        cli.main([str(srt)])

        out = tmp_path / "clip-captions.ass"
        content = out.read_text(encoding="utf-8")
        assert content.startswith("[Script Info]\n")
        assert content.count("Dialogue:") == 1
        assert "Saved captions" in capsys.readouterr().err

    def test_style_flags(self, tmp_path, hello_srt):
        srt = tmp_path / "clip.srt"
        srt.write_text(hello_srt, encoding="utf-8")

        cli.main([
            str(srt),
            "--highlight", "--highlight-color", "#FF0000",
            "--animation", "scale", "--text-case", "uppercase",
            "--position", "top", "--border", "--border-width", "4",
            "--font-family", "Impact", "--font-size", "40",
        ])

        content = (tmp_path / "clip-captions.ass").read_text(encoding="utf-8")
        assert "Style: Default,Impact,40," in content
        assert ",1,4,0,8,10,10,10,1\n" in content
        assert content.count("Dialogue:") == 2
        assert "{\\fscx120\\fscy120\\c&H000000FF}HELLO" in content

    def test_goes_through_compile_captions(self, tmp_path, hello_srt, monkeypatch):
        calls = []
        real_compile = cli.compile_captions

        def recording_compile(transcript, style=None):
            calls.append((transcript, style))
            return real_compile(transcript, style)

        monkeypatch.setattr(cli, "compile_captions", recording_compile)
        srt = tmp_path / "clip.srt"
        srt.write_text(hello_srt, encoding="utf-8")

        cli.main([str(srt), "--position", "middle"])

        assert len(calls) == 1
        assert calls[0][0] == hello_srt
        assert calls[0][1].position.value == "middle"

    def test_output_dir(self, tmp_path, hello_srt):
        srt = tmp_path / "clip.srt"
        srt.write_text(hello_srt, encoding="utf-8")
        out_dir = tmp_path / "out"
        out_dir.mkdir()

        path = cli.run(cli.build_parser().parse_args([str(srt), "--output-dir", str(out_dir)]))

        assert path == out_dir / "clip-captions.ass"
        assert path.is_file()

    def test_conflict_adds_counter(self, tmp_path, hello_srt):
        srt = tmp_path / "clip.srt"
        srt.write_text(hello_srt, encoding="utf-8")
        (tmp_path / "clip-captions.ass").write_text("existing", encoding="utf-8")

        cli.main([str(srt)])

        assert (tmp_path / "clip-captions.ass").read_text(encoding="utf-8") == "existing"
        assert (tmp_path / "clip-captions-2.ass").is_file()


class TestTranscribeMedia:

    def test_saves_transcript_and_captions(self, tmp_path, fake_transcription, hello_srt, capsys):
        media = tmp_path / "clip.mp4"
        media.write_bytes(b"fake video")

        cli.main([str(media)])

        assert (tmp_path / "clip-transcript.srt").read_text(encoding="utf-8") == hello_srt
        assert (tmp_path / "clip-captions.ass").is_file()
        assert "Transcribing clip.mp4..." in capsys.readouterr().err

    def test_service_error_exits_1(self, tmp_path, fake_transcription, capsys):
        fake_transcription.error = TranscriptionAPIError(500, "server error")
        media = tmp_path / "clip.mp4"
        media.write_bytes(b"fake video")

        with pytest.raises(SystemExit) as exc_info:
            cli.main([str(media)])

        assert exc_info.value.code == 1
        assert "server error" in capsys.readouterr().err
        assert not (tmp_path / "clip-captions.ass").exists()


class TestErrors:

    def _expect_exit(self, argv, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(argv)
        assert exc_info.value.code == 1
        return capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        err = self._expect_exit([str(tmp_path / "nope.srt")], capsys)
        assert "File not found" in err

    def test_unsupported_extension(self, tmp_path, capsys):
        doc = tmp_path / "notes.txt"
        doc.write_text("hello", encoding="utf-8")
        err = self._expect_exit([str(doc)], capsys)
        assert "Unsupported file type '.txt'" in err

    def test_missing_output_dir(self, tmp_path, hello_srt, capsys):
        srt = tmp_path / "clip.srt"
        srt.write_text(hello_srt, encoding="utf-8")
        err = self._expect_exit([str(srt), "--output-dir", str(tmp_path / "missing")], capsys)
        assert "Output directory does not exist" in err

    def test_invalid_color(self, tmp_path, hello_srt, capsys):
        srt = tmp_path / "clip.srt"
        srt.write_text(hello_srt, encoding="utf-8")
        err = self._expect_exit([str(srt), "--font-color", "white"], capsys)
        assert "Error: Invalid color" in err
        assert not (tmp_path / "clip-captions.ass").exists()

    def test_malformed_transcript(self, tmp_path, capsys):
        srt = tmp_path / "clip.srt"
        srt.write_text("1\nbroken\nHi\n", encoding="utf-8")
        err = self._expect_exit([str(srt)], capsys)
        assert "Invalid time range" in err

    def test_invalid_font_size(self, tmp_path, hello_srt, capsys):
        srt = tmp_path / "clip.srt"
        srt.write_text(hello_srt, encoding="utf-8")
        err = self._expect_exit([str(srt), "--font-size", "0"], capsys)
        assert "Font size" in err
