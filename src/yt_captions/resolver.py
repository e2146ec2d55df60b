"""
resolver.py — Turn free-form user input into a video or playlist ID.

Accepted video references, tried in this order (first match wins):
    1. Watch URL     https://www.youtube.com/watch?v=VIDEO_ID&t=42
    2. Short link    https://youtu.be/VIDEO_ID
    3. Embed-style   https://www.youtube.com/embed/VIDEO_ID  (also shorts/, v/, live/)
    4. Bare ID       VIDEO_ID

Playlist references are read from the `list=` query parameter only.
"""

from __future__ import annotations

import re

from yt_captions.errors import InvalidVideoIdError

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# An ID is exactly 11 base64url characters.  The negative lookahead rejects
# longer runs instead of silently truncating them to their first 11 chars.
_ID = r"(?P<id>[A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"

_HOST = r"(?:https?://)?(?:(?:www|m|music)\.)?youtube(?:-nocookie)?\.com"

# Ordered list of URL heuristics.
_URL_PATTERNS: list[re.Pattern[str]] = [
    # Watch URL: the ID sits in the "v" query parameter, anywhere in the query.
    re.compile(_HOST + r"/watch\?(?:[^#]*?&)?v=" + _ID),
    # Short share link: the ID is the first path segment.
    re.compile(r"(?:https?://)?youtu\.be/" + _ID),
    # Embed / shorts / old "v/" / live URLs: the ID follows the path prefix.
    re.compile(_HOST + r"/(?:embed|shorts|v|live)/" + _ID),
]

_BARE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{11}$")

_PLAYLIST_PATTERN = re.compile(r"[?&]list=(?P<id>[A-Za-z0-9_-]+)")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_video_id(url_or_id: str) -> str:
    """
    Extract a YouTube video ID from a URL string, or validate a raw 11-char ID.

    Args:
        url_or_id: A YouTube URL or a raw video ID.

    Returns:
        The 11-character video ID.

    Raises:
        InvalidVideoIdError: If the string doesn't match any known format.
    """
    url_or_id = url_or_id.strip()

    for pattern in _URL_PATTERNS:
        match = pattern.search(url_or_id)
        if match:
            return match.group("id")

    if _BARE_ID_PATTERN.match(url_or_id):
        return url_or_id

    raise InvalidVideoIdError(url_or_id)


def parse_playlist_id(url: str) -> str:
    """
    Extract the playlist ID from the `list=` parameter of a YouTube URL.

    Raises:
        InvalidVideoIdError: If the input has no `list=` parameter.
    """
    match = _PLAYLIST_PATTERN.search(url.strip())
    if not match:
        raise InvalidVideoIdError(url.strip(), reason="no playlist (list=) parameter")
    return match.group("id")
