"""
metadata.py — Ask YouTube's private player endpoint what a video offers.

The watch page embeds an API key for YouTube's internal ("innertube") API.
We read that key, POST a small client-context body to the player endpoint,
and pull three things out of the JSON answer:

    * playabilityStatus  → mapped onto our error hierarchy
    * videoDetails.title → used for headers and output filenames
    * captionTracks      → one TranscriptTrack per track

All knowledge of the player JSON layout lives in this module, so upstream
format drift only needs fixing here.
"""

from __future__ import annotations

import html
import json
import logging
import re
from dataclasses import dataclass, field

from yt_captions.config import Settings
from yt_captions.errors import (
    AgeRestrictedError,
    ParseError,
    RequestBlockedError,
    TranscriptsDisabledError,
    VideoUnavailableError,
)
from yt_captions.models import TranscriptTrack, TranslationLanguage, watch_url
from yt_captions.session import Session

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PLAYER_URL = "https://www.youtube.com/youtubei/v1/player"

_API_KEY_PATTERN = re.compile(r'"INNERTUBE_API_KEY":\s*"([a-zA-Z0-9_-]+)"')

_STATUS_OK = "OK"
_STATUS_LOGIN_REQUIRED = "LOGIN_REQUIRED"
_STATUS_ERROR = "ERROR"


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class VideoMetadata:
    """
    What the player endpoint told us about one video.

    Attributes:
        video_id:              The 11-character YouTube video identifier.
        title:                 Video title, or None if the response had none.
        tracks:                Caption tracks in upstream order (never empty).
        translation_languages: Targets available for server-side translation.
    """
    video_id: str
    title: str | None
    tracks: tuple[TranscriptTrack, ...]
    translation_languages: tuple[TranslationLanguage, ...] = field(default=())


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------

def extract_api_key(page: str, video_id: str) -> str:
    """Pull the innertube API key out of a watch page."""
    match = _API_KEY_PATTERN.search(page)
    if not match:
        raise VideoUnavailableError(video_id, reason="no API key on watch page")
    return match.group(1)


def build_player_request(video_id: str, settings: Settings) -> dict:
    return {
        "context": {
            "client": {
                "clientName": settings.innertube_client_name,
                "clientVersion": settings.innertube_client_version,
                "hl": "en",
            },
        },
        "videoId": video_id,
    }


def _matches(reason: str, markers: list[str]) -> bool:
    lowered = reason.lower()
    return any(marker.lower() in lowered for marker in markers)


def check_playability(data: dict, video_id: str, settings: Settings) -> None:
    """
    Raise the most specific error for a non-playable video.

    A missing status is treated as playable; the caption check that follows
    decides whether anything can actually be fetched.
    """
    playability = data.get("playabilityStatus") or {}
    status = playability.get("status")
    if status is None or status == _STATUS_OK:
        return

    reason = playability.get("reason") or ""
    logger.debug("Video %s not playable: status=%s reason=%r", video_id, status, reason)

    if status == _STATUS_LOGIN_REQUIRED:
        if _matches(reason, settings.bot_detected_reasons):
            raise RequestBlockedError(video_id, reason=reason)
        if _matches(reason, settings.age_restricted_reasons):
            raise AgeRestrictedError(video_id)

    if _matches(reason, settings.transcripts_disabled_reasons):
        raise TranscriptsDisabledError(video_id)

    if status == _STATUS_ERROR and _matches(reason, settings.unavailable_reasons):
        raise VideoUnavailableError(video_id, reason=reason)

    # Anything else non-OK (UNPLAYABLE, CONTENT_CHECK_REQUIRED, ...) still
    # means there is nothing we can read.
    raise VideoUnavailableError(video_id, reason=f"{status}: {reason}" if reason else status)


def _text_of(node: dict | None) -> str:
    """Read a YouTube "text" node, which is either simpleText or runs."""
    if not node:
        return ""
    if "simpleText" in node:
        return node["simpleText"]
    return "".join(run.get("text", "") for run in node.get("runs", []))


def parse_caption_tracks(
    data: dict,
    video_id: str,
) -> tuple[tuple[TranscriptTrack, ...], tuple[TranslationLanguage, ...]]:
    """
    Build TranscriptTracks from the player response.

    Raises:
        TranscriptsDisabledError: If the response lists no usable tracks.
    """
    renderer = (data.get("captions") or {}).get("playerCaptionsTracklistRenderer")
    if not renderer or not renderer.get("captionTracks"):
        raise TranscriptsDisabledError(video_id)

    tracks = []
    for raw in renderer["captionTracks"]:
        base_url = raw.get("baseUrl")
        language_code = raw.get("languageCode")
        if not base_url or not language_code:
            # Tracks without a URL or code can't be selected or fetched.
            continue
        tracks.append(TranscriptTrack(
            language_code=language_code,
            language=_text_of(raw.get("name")) or language_code,
            is_generated=raw.get("kind", "") == "asr",
            is_translatable=bool(raw.get("isTranslatable", False)),
            base_url=base_url,
        ))

    if not tracks:
        raise TranscriptsDisabledError(video_id)

    translation_languages = tuple(
        TranslationLanguage(
            language_code=lang["languageCode"],
            language=_text_of(lang.get("languageName")) or lang["languageCode"],
        )
        for lang in renderer.get("translationLanguages", [])
        if lang.get("languageCode")
    )
    return tuple(tracks), translation_languages


# ---------------------------------------------------------------------------
# Metadata fetching
# ---------------------------------------------------------------------------

def fetch_video_metadata(session: Session, video_id: str) -> VideoMetadata:
    """
    Fetch playability, title and caption tracks for a video.

    Steps, strictly in order: watch page → API key → player POST →
    playability check → caption track extraction.

    Args:
        session:  The Session to issue requests through.
        video_id: The 11-character YouTube video ID.

    Returns:
        A VideoMetadata whose `tracks` is never empty.

    Raises:
        VideoUnavailableError, AgeRestrictedError, RequestBlockedError,
        TranscriptsDisabledError, ParseError, IpBlockedError, NetworkError.
    """
    page = html.unescape(session.get(watch_url(video_id)))
    api_key = extract_api_key(page, video_id)

    body = session.post(
        PLAYER_URL,
        build_player_request(video_id, session.settings),
        params={"key": api_key},
    )
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise ParseError(f"player response for {video_id}", reason=str(exc)) from exc
    if not isinstance(data, dict):
        raise ParseError(f"player response for {video_id}", reason="expected a JSON object")

    check_playability(data, video_id, session.settings)
    tracks, translation_languages = parse_caption_tracks(data, video_id)

    title = (data.get("videoDetails") or {}).get("title") or None
    logger.debug("Video %s: %d caption track(s)", video_id, len(tracks))

    return VideoMetadata(
        video_id=video_id,
        title=title,
        tracks=tracks,
        translation_languages=translation_languages,
    )
