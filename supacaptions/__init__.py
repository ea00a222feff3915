"""SupaCaptions: styled, word-animated subtitle tracks from speech transcripts.

WHY: Speech-to-text services return plain timed cues (SRT). Short-form video
needs captions that show a few words at a time, optionally highlighting the
word being spoken. This package compiles those cues into an ASS subtitle
track that a video-processing service can burn into the video.

HOW: Three layers: the core compiler (parse cues, chunk words, subdivide
time, emit ASS markup), thin HTTP clients for the transcription and
processing services, and two front ends (FastAPI server, argparse CLI).

RULES:
- The compiler is pure and synchronous; it never performs I/O
- All service calls go through the clients in ``supacaptions.api``
- ``compile_captions`` is the one entry point the front ends (CLI and
  server) use to turn a transcript into captions
"""

__version__ = "0.1.0"
