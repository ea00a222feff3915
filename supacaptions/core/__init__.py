"""Core caption compiler modules.

WHY: The core package holds the pure transformation from timed cues to
caption groups and per-word intervals. It has no I/O and no service
dependencies, so every piece is testable in isolation.

HOW: timecode.py and cue_parser.py read the SRT input, chunker.py
splits cues into word groups and word intervals, style.py holds the
styling record and ASS color encoding, ir.py defines the data types.

RULES:
- All times are integer centiseconds (1/100 s), never floats
- Every entity is created fresh per compile call and never mutated
- Integer division truncates; remainders are never redistributed
"""
