"""
playlist.py — Fetch transcripts for every video of a playlist, one at a time.

Listing:
    The playlist page embeds its first batch of entries in `ytInitialData`.
    Longer playlists carry a continuation token which we feed to the browse
    endpoint until no new token comes back.

Processing:
    Entries are handled strictly sequentially, with the Session's delay
    applied before each one.  A TranscriptError on one entry is recorded in
    that entry's PlaylistItemResult and the loop moves on; only a failure to
    list the playlist itself propagates.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterator

from yt_captions.errors import ParseError, TranscriptError, VideoUnavailableError
from yt_captions.models import Transcript
from yt_captions.session import Session

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PLAYLIST_URL = "https://www.youtube.com/playlist"
BROWSE_URL = "https://www.youtube.com/youtubei/v1/browse"

_INITIAL_DATA_PATTERN = re.compile(r"""(?:var\s+ytInitialData|window\["ytInitialData"\])\s*=\s*""")
_API_KEY_PATTERN = re.compile(r'"INNERTUBE_API_KEY":\s*"([a-zA-Z0-9_-]+)"')

# Upper bound on continuation pages; YouTube caps playlists at 5000 entries
# and serves 100 per page.
_MAX_CONTINUATIONS = 60


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class PlaylistItemResult:
    """
    Outcome for one playlist entry: a Transcript or the error that stopped it.

    Exactly one of `transcript` / `error` is set.
    """
    video_id: str
    transcript: Transcript | None = None
    error: TranscriptError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_kind(self) -> str | None:
        return self.error.kind if self.error is not None else None


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

def _walk(node) -> Iterator[dict]:
    """Yield every dict inside a JSON tree, depth-first, in document order."""
    if isinstance(node, dict):
        yield node
        for value in node.values():
            yield from _walk(value)
    elif isinstance(node, list):
        for item in node:
            yield from _walk(item)


def _extract_initial_data(page: str, playlist_id: str) -> dict:
    match = _INITIAL_DATA_PATTERN.search(page)
    if not match:
        raise ParseError(f"playlist page for {playlist_id}", reason="ytInitialData not found")
    try:
        data, _ = json.JSONDecoder().raw_decode(page, match.end())
    except json.JSONDecodeError as exc:
        raise ParseError(f"playlist page for {playlist_id}", reason=str(exc)) from exc
    return data


def _check_alerts(data: dict, playlist_id: str) -> None:
    for node in _walk(data.get("alerts", [])):
        renderer = node.get("alertRenderer") or node.get("alertWithButtonRenderer")
        if renderer and renderer.get("type") == "ERROR":
            text = renderer.get("text") or {}
            reason = text.get("simpleText") or "".join(
                run.get("text", "") for run in text.get("runs", [])
            )
            raise VideoUnavailableError(playlist_id, reason=reason or "playlist unavailable")


def _collect(data: dict) -> tuple[list[str], str | None]:
    """Video IDs and the continuation token (if any) in one JSON page."""
    video_ids: list[str] = []
    token: str | None = None
    for node in _walk(data):
        renderer = node.get("playlistVideoRenderer")
        if renderer and renderer.get("videoId"):
            video_ids.append(renderer["videoId"])
        command = node.get("continuationCommand")
        if command and command.get("token"):
            token = command["token"]
    return video_ids, token


def list_playlist_video_ids(session: Session, playlist_id: str) -> list[str]:
    """
    Return the video IDs of a playlist in listing order, without duplicates.

    Raises:
        VideoUnavailableError: The playlist doesn't exist or is private.
        ParseError:            The page or a continuation couldn't be read.
        IpBlockedError, RequestBlockedError, NetworkError: from the Session.
    """
    page = session.get(PLAYLIST_URL, params={"list": playlist_id})
    data = _extract_initial_data(page, playlist_id)
    _check_alerts(data, playlist_id)

    video_ids, token = _collect(data)
    key_match = _API_KEY_PATTERN.search(page)
    params = {"key": key_match.group(1)} if key_match else None

    seen_tokens: set[str] = set()
    while token and token not in seen_tokens and len(seen_tokens) < _MAX_CONTINUATIONS:
        seen_tokens.add(token)
        body = session.post(
            BROWSE_URL,
            {
                "context": {
                    "client": {
                        "clientName": session.settings.browse_client_name,
                        "clientVersion": session.settings.browse_client_version,
                    },
                },
                "continuation": token,
            },
            params=params,
        )
        try:
            page_data = json.loads(body)
        except json.JSONDecodeError as exc:
            raise ParseError(f"playlist continuation for {playlist_id}", reason=str(exc)) from exc
        more, token = _collect(page_data)
        video_ids.extend(more)

    # Preserve order; drop repeats that show up across page boundaries.
    unique = list(dict.fromkeys(video_ids))
    logger.info("Playlist %s lists %d video(s)", playlist_id, len(unique))
    return unique


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

def iter_playlist(
    session: Session,
    playlist_id: str,
    process: Callable[[str], Transcript],
    max_count: int | None = None,
) -> Iterator[PlaylistItemResult]:
    """
    Run `process` on each playlist entry and yield one result per entry.

    Args:
        session:     Session used for the listing and the per-entry delay.
        playlist_id: The playlist to walk.
        process:     Single-video pipeline; takes a video ID, returns a
                     Transcript, raises TranscriptError on failure.
        max_count:   Stop after this many entries.

    Raises:
        Only listing failures; per-entry TranscriptErrors are captured.
    """
    if max_count is not None and max_count < 0:
        raise ValueError(f"max_count must be >= 0, got {max_count}")

    video_ids = list_playlist_video_ids(session, playlist_id)
    if max_count is not None:
        video_ids = video_ids[:max_count]

    total = len(video_ids)
    for index, video_id in enumerate(video_ids, start=1):
        session.pause()
        logger.info("[%d/%d] Processing video %s", index, total, video_id)
        try:
            transcript = process(video_id)
        except TranscriptError as exc:
            logger.warning("[%d/%d] %s failed: %s", index, total, video_id, exc.message)
            yield PlaylistItemResult(video_id=video_id, error=exc)
        else:
            yield PlaylistItemResult(video_id=video_id, transcript=transcript)


def run_playlist(
    session: Session,
    playlist_id: str,
    process: Callable[[str], Transcript],
    max_count: int | None = None,
) -> list[PlaylistItemResult]:
    """Collect iter_playlist() into a list (the playlist report)."""
    return list(iter_playlist(session, playlist_id, process, max_count))
