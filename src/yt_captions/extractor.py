"""
extractor.py — The single-video pipeline in one place.

This is the entry point most callers want.  It chains the pipeline steps:

    1. Resolve the reference      → resolver.parse_video_id()
    2. Ask the player endpoint    → metadata.fetch_video_metadata()
    3. Pick a caption track       → catalog.select_track()
    4. Download and parse it      → fetcher.fetch_transcript()
    5. Render it (extract() only) → formatters.render()

Every step runs sequentially on one Session; nothing is cached between calls.
"""

from __future__ import annotations

import logging

from yt_captions.catalog import TranscriptCatalog, select_track
from yt_captions.fetcher import fetch_transcript
from yt_captions.formatters import FORMATS, render
from yt_captions.metadata import fetch_video_metadata
from yt_captions.models import Transcript
from yt_captions.resolver import parse_video_id
from yt_captions.session import Session

logger = logging.getLogger(__name__)


def list_transcripts(video_id: str, *, session: Session | None = None) -> TranscriptCatalog:
    """
    Fetch the caption tracks a video offers, without downloading any of them.

    Args:
        video_id: The 11-character YouTube video ID (NOT a full URL).
        session:  Session to reuse; a fresh one is created when omitted.

    Raises:
        TranscriptError: (or subclass) on any metadata failure.
    """
    session = session or Session()
    return TranscriptCatalog.from_metadata(fetch_video_metadata(session, video_id))


def get_transcript(
    video_id: str,
    languages: list[str] | None = None,
    translate_to: str | None = None,
    *,
    session: Session | None = None,
) -> Transcript:
    """
    Fetch the best-matching transcript for a single video.

    Args:
        video_id:     The 11-character YouTube video ID (NOT a full URL).
        languages:    Language codes in descending priority (e.g. ["de", "en"]).
                      Manual tracks win over generated ones for the same
                      code.  When empty, the first manual track (or else the
                      first generated one) is used.
        translate_to: Optional target language for server-side translation.
        session:      Session to reuse; a fresh one is created when omitted.

    Raises:
        VideoUnavailableError, TranscriptsDisabledError, NoTranscriptFoundError,
        AgeRestrictedError, IpBlockedError, RequestBlockedError,
        TranslationUnavailableError, ParseError, NetworkError.
    """
    session = session or Session()
    catalog = list_transcripts(video_id, session=session)
    track = select_track(catalog, languages)
    logger.info(
        "Selected %s track %r for %s",
        "generated" if track.is_generated else "manual", track.language_code, video_id,
    )
    return fetch_transcript(session, catalog, track, translate_to)


def extract(
    url_or_id: str,
    languages: list[str] | None = None,
    fmt: str = "text",
    *,
    translate_to: str | None = None,
    timestamps: bool = False,
    include_url: bool = False,
    session: Session | None = None,
) -> str:
    """
    One-call interface: parse URL → fetch transcript → render output.

    Args:
        url_or_id:    A YouTube URL or raw video ID.
        languages:    Optional language priority list.
        fmt:          One of json, text, txt, srt, markdown, md.
        translate_to: Optional translation target language code.
        timestamps:   Prefix text/markdown lines with the cue start time.
        include_url:  Start text/markdown output with the title and watch URL.
        session:      Session to reuse; a fresh one is created when omitted.

    Raises:
        ValueError:      If fmt isn't a known format (checked before any request).
        TranscriptError: (or subclass) on any extraction failure.
    """
    # Fail on a bad format before spending any requests.
    if fmt.lower() not in FORMATS:
        raise ValueError(f"Unknown format {fmt!r}; expected one of {', '.join(FORMATS)}")

    video_id = parse_video_id(url_or_id)
    transcript = get_transcript(video_id, languages, translate_to, session=session)
    return render(transcript, fmt, timestamps=timestamps, include_url=include_url)
