"""
formatters.py — Render a Transcript as JSON, plain text, Markdown or SRT.

Renderers are pure functions (no network, no files) looked up by format name
in a single dispatch table, so adding a format means adding one function and
one table entry:

    render(transcript, "srt")
    render(transcript, "md", timestamps=True, include_url=True)

Every renderer returns the complete document as a string ending in a newline.
"""

from __future__ import annotations

import json
import re
from typing import Callable

from yt_captions.models import Transcript

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

FORMATS = ("json", "text", "txt", "srt", "markdown", "md")

# File extension per format, used by the CLI's file writer.
EXTENSIONS = {
    "json": "json",
    "text": "txt",
    "txt": "txt",
    "srt": "srt",
    "markdown": "md",
    "md": "md",
}

_MARKDOWN_HINTS = ("**", "##", "*")

_MAX_SRT_HOURS = 100

_MAX_FILENAME_LENGTH = 200


def _header_title(transcript: Transcript) -> str:
    return transcript.title or transcript.video_id


# ---------------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------------

def format_json(transcript: Transcript, timestamps: bool = False, include_url: bool = False) -> str:
    """
    A pretty-printed JSON array of {"text", "start", "duration"} objects.

    `timestamps` and `include_url` don't apply: times are always present and
    the array has nowhere to put a header.
    """
    return json.dumps(transcript.to_raw_data(), indent=2, ensure_ascii=False) + "\n"


def format_text(transcript: Transcript, timestamps: bool = False, include_url: bool = False) -> str:
    """One line per cue, optionally prefixed by `[12.34s]`."""
    lines: list[str] = []
    if include_url:
        lines.append(f"{_header_title(transcript)}: {transcript.source_url}")
        lines.append("")

    for cue in transcript:
        if timestamps:
            lines.append(f"[{cue.start:.2f}s] {cue.text}")
        else:
            lines.append(cue.text)

    return "\n".join(lines) + "\n"


def _is_preformatted(transcript: Transcript) -> bool:
    # Cleanup output arrives as a single cue that may already be Markdown.
    return len(transcript.cues) == 1 and any(
        hint in transcript.cues[0].text for hint in _MARKDOWN_HINTS
    )


def format_markdown(transcript: Transcript, timestamps: bool = False, include_url: bool = False) -> str:
    """
    A `# Transcript` document with one paragraph per cue.

    With `include_url`, the document opens with `![title](url)` and a blank
    line.  With `timestamps`, each paragraph starts with `**[12.34s]**`.
    """
    parts: list[str] = []
    if include_url:
        parts.append(f"![{_header_title(transcript)}]({transcript.source_url})\n\n")

    if _is_preformatted(transcript):
        text = transcript.cues[0].text
        if not text.lstrip().startswith("#"):
            parts.append("# Transcript\n\n")
        parts.append(f"{text}\n")
        return "".join(parts)

    parts.append("# Transcript\n\n")
    for cue in transcript:
        if timestamps:
            parts.append(f"**[{cue.start:.2f}s]** {cue.text}\n\n")
        else:
            parts.append(f"{cue.text}\n\n")

    return "".join(parts)


def format_srt_time(seconds: float) -> str:
    """
    Format seconds as an SRT time code, HH:MM:SS,mmm.

    Milliseconds are rounded to the nearest value, not truncated, so
    3.919 stays 3.919 even when float arithmetic yields 3.91899999.

    Raises:
        ValueError: For negative times or times of 100 hours or more.
    """
    if seconds < 0:
        raise ValueError(f"SRT time must be >= 0, got {seconds}")
    total_ms = round(seconds * 1000)
    hours, rest = divmod(total_ms, 3_600_000)
    if hours >= _MAX_SRT_HOURS:
        raise ValueError(f"SRT time {seconds}s exceeds {_MAX_SRT_HOURS} hours")
    minutes, rest = divmod(rest, 60_000)
    secs, millis = divmod(rest, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def format_srt(transcript: Transcript, timestamps: bool = False, include_url: bool = False) -> str:
    """Numbered SRT blocks separated by blank lines."""
    blocks = []
    for index, cue in enumerate(transcript, start=1):
        blocks.append(
            f"{index}\n"
            f"{format_srt_time(cue.start)} --> {format_srt_time(cue.start + cue.duration)}\n"
            f"{cue.text}\n"
        )
    return "\n".join(blocks) + ("\n" if blocks else "")


_RENDERERS: dict[str, Callable[[Transcript, bool, bool], str]] = {
    "json": format_json,
    "text": format_text,
    "txt": format_text,
    "srt": format_srt,
    "markdown": format_markdown,
    "md": format_markdown,
}


def render(
    transcript: Transcript,
    fmt: str = "text",
    *,
    timestamps: bool = False,
    include_url: bool = False,
) -> str:
    """
    Render `transcript` in the named format.

    Raises:
        ValueError: If `fmt` isn't one of FORMATS.
    """
    renderer = _RENDERERS.get(fmt.lower())
    if renderer is None:
        raise ValueError(f"Unknown format {fmt!r}; expected one of {', '.join(FORMATS)}")
    return renderer(transcript, timestamps, include_url)


# ---------------------------------------------------------------------------
# Filenames
# ---------------------------------------------------------------------------

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w \-.]")
_REPEATED_UNDERSCORES = re.compile(r"_+")


def sanitize_filename(title: str) -> str:
    """
    Turn a video title into a safe file basename.

    Anything other than letters, digits, spaces, '-', '_' and '.' becomes an
    underscore; whitespace runs become a single underscore; repeated
    underscores collapse; the result is capped at 200 characters.

    Example: "My Video: Part 1/2" → "My_Video_Part_1_2"
    """
    sanitized = _UNSAFE_FILENAME_CHARS.sub("_", title)
    sanitized = "_".join(sanitized.split())
    sanitized = _REPEATED_UNDERSCORES.sub("_", sanitized)
    return sanitized[:_MAX_FILENAME_LENGTH].strip("_")
