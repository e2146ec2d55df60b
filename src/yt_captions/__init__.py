"""
yt_captions — Fetch YouTube caption tracks and render them as JSON, text,
Markdown or SRT.

Public API:
    extract()                  High-level one-call interface (URL → rendered output).
    get_transcript()           Fetch the best-matching Transcript for a video ID.
    list_transcripts()         Fetch the TranscriptCatalog without downloading cues.
    parse_video_id()           Parse a YouTube URL or validate a bare video ID.
    parse_playlist_id()        Read the list= parameter from a playlist URL.
    select_track()             Pick a track by language priority, manual first.
    render()                   Render a Transcript in a named format.
    run_playlist()             Fetch every video of a playlist, isolating failures.
    Session                    HTTP session with delay and consent handling.

Exception hierarchy (all importable from this package):
    TranscriptError                 Base exception for all caption errors.
    ├── InvalidVideoIdError         Input isn't a recognisable video/playlist reference.
    ├── VideoUnavailableError       Video doesn't exist, was removed, or is private.
    ├── TranscriptsDisabledError    Video has no caption tracks.
    ├── NoTranscriptFoundError      No track in the requested language(s).
    ├── AgeRestrictedError          Video is age-gated.
    ├── IpBlockedError              YouTube answered 403/429.
    ├── RequestBlockedError         Bot challenge or persistent consent page.
    ├── TranslationUnavailableError Requested translation isn't offered.
    ├── ParseError                  Upstream payload couldn't be parsed.
    ├── NetworkError                Timeout, connection or HTTP failure.
    ├── CleanupServiceError         The OpenAI cleanup call failed.
    └── OutputWriteError            A rendered transcript could not be written.

Usage:
    from yt_captions import extract
    srt = extract("https://youtu.be/dQw4w9WgXcQ", languages=["en"], fmt="srt")
"""

from yt_captions.catalog import TranscriptCatalog, list_all, select_track
from yt_captions.errors import (
    AgeRestrictedError,
    CleanupServiceError,
    InvalidVideoIdError,
    IpBlockedError,
    NetworkError,
    NoTranscriptFoundError,
    OutputWriteError,
    ParseError,
    RequestBlockedError,
    TranscriptError,
    TranscriptsDisabledError,
    TranslationUnavailableError,
    VideoUnavailableError,
)
from yt_captions.extractor import extract, get_transcript, list_transcripts
from yt_captions.formatters import render
from yt_captions.models import CaptionCue, Transcript, TranscriptTrack, TranslationLanguage
from yt_captions.playlist import PlaylistItemResult, run_playlist
from yt_captions.resolver import parse_playlist_id, parse_video_id
from yt_captions.session import Session

__all__ = [
    "extract",
    "get_transcript",
    "list_transcripts",
    "parse_video_id",
    "parse_playlist_id",
    "select_track",
    "list_all",
    "render",
    "run_playlist",
    "Session",
    "TranscriptCatalog",
    "TranscriptTrack",
    "TranslationLanguage",
    "CaptionCue",
    "Transcript",
    "PlaylistItemResult",
    "TranscriptError",
    "InvalidVideoIdError",
    "VideoUnavailableError",
    "TranscriptsDisabledError",
    "NoTranscriptFoundError",
    "AgeRestrictedError",
    "IpBlockedError",
    "RequestBlockedError",
    "TranslationUnavailableError",
    "ParseError",
    "NetworkError",
    "CleanupServiceError",
    "OutputWriteError",
]
