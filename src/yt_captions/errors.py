"""
errors.py — Custom exception hierarchy for yt-captions.

Every exception carries an `http_status` attribute so the FastAPI error
handler can translate library-level errors directly into the correct HTTP
response code, and a `kind` name that playlist reports use to describe a
failed entry without holding on to the exception itself.

Hierarchy:
    TranscriptError (base, 500)
    ├── InvalidVideoIdError (400)
    ├── VideoUnavailableError (404)
    ├── TranscriptsDisabledError (404)
    ├── NoTranscriptFoundError (404)
    ├── AgeRestrictedError (403)
    ├── IpBlockedError (429)
    ├── RequestBlockedError (503)
    ├── TranslationUnavailableError (400)
    ├── ParseError (502)
    ├── NetworkError (502)
    ├── CleanupServiceError (502)
    └── OutputWriteError (500)
"""

from __future__ import annotations


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class TranscriptError(Exception):
    """
    Root exception for all caption-retrieval errors.

    Attributes:
        message:     Human-readable description of what went wrong.
        http_status: Suggested HTTP status code for the API layer.
    """

    kind = "TranscriptError"

    def __init__(self, message: str, http_status: int = 500) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status


def _detail(reason: str) -> str:
    return f": {reason}" if reason else ""


# ---------------------------------------------------------------------------
# Reference and video-level errors
# ---------------------------------------------------------------------------

class InvalidVideoIdError(TranscriptError):
    """
    Raised when the input is neither a recognised YouTube URL nor a bare
    11-character video ID (or, in playlist mode, carries no `list=` value).
    """

    kind = "InvalidVideoId"

    def __init__(self, value: str, reason: str = "") -> None:
        super().__init__(
            message=f"Invalid video ID: {value!r}{_detail(reason)}",
            http_status=400,
        )
        self.value = value


class VideoUnavailableError(TranscriptError):
    """
    Raised when the video doesn't exist, was removed, is private, or the
    watch page carries no API key to query it with.
    """

    kind = "VideoUnavailable"

    def __init__(self, video_id: str, reason: str = "") -> None:
        super().__init__(
            message=f"Video unavailable: {video_id}{_detail(reason)}",
            http_status=404,
        )
        self.video_id = video_id


class TranscriptsDisabledError(TranscriptError):
    """
    Raised when the video exists but offers no caption tracks at all.
    """

    kind = "TranscriptsDisabled"

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message=f"Transcripts disabled for video: {video_id}",
            http_status=404,
        )
        self.video_id = video_id


class NoTranscriptFoundError(TranscriptError):
    """
    Raised when caption tracks exist but none matches the requested
    languages, or when a fetched caption payload holds no cues.
    """

    kind = "NoTranscriptFound"

    def __init__(self, video_id: str, requested: list[str] | None = None) -> None:
        requested = list(requested or [])
        if requested:
            message = (
                f"No transcript found for video {video_id} "
                f"in languages: [{', '.join(requested)}]"
            )
        else:
            message = f"No transcript found for video: {video_id}"
        super().__init__(message=message, http_status=404)
        self.video_id = video_id
        self.requested = requested


class AgeRestrictedError(TranscriptError):
    """
    Raised when the video is age-gated and can't be read anonymously.
    """

    kind = "AgeRestricted"

    def __init__(self, video_id: str) -> None:
        super().__init__(
            message=f"Age restricted video: {video_id}",
            http_status=403,
        )
        self.video_id = video_id


# ---------------------------------------------------------------------------
# Blocking and transport errors
# ---------------------------------------------------------------------------

class IpBlockedError(TranscriptError):
    """
    Raised when YouTube answers with a forbidden / too-many-requests status.
    Maps to HTTP 429: backing off or changing network is the only remedy.
    """

    kind = "IpBlocked"

    def __init__(self, target: str, status_code: int | None = None) -> None:
        status = f" (HTTP {status_code})" if status_code else ""
        super().__init__(
            message=f"IP blocked while requesting {target}{status}",
            http_status=429,
        )
        self.target = target
        self.status_code = status_code


class RequestBlockedError(TranscriptError):
    """
    Raised when YouTube serves a bot challenge, or keeps serving the consent
    page after the consent cookie has been presented.
    """

    kind = "RequestBlocked"

    def __init__(self, target: str, reason: str = "") -> None:
        super().__init__(
            message=f"Request blocked (bot detected) for {target}{_detail(reason)}",
            http_status=503,
        )
        self.target = target


class NetworkError(TranscriptError):
    """
    Raised for timeouts, DNS and connection failures, and unexpected HTTP
    statuses that don't indicate blocking.
    """

    kind = "NetworkError"

    def __init__(self, target: str, reason: str = "") -> None:
        super().__init__(
            message=f"HTTP request failed for {target}{_detail(reason)}",
            http_status=502,
        )
        self.target = target


# ---------------------------------------------------------------------------
# Caption-level errors
# ---------------------------------------------------------------------------

class TranslationUnavailableError(TranscriptError):
    """
    Raised when a translation is requested for a track that isn't
    translatable, or into a language YouTube doesn't offer.
    """

    kind = "TranslationUnavailable"

    def __init__(self, video_id: str, language_code: str, reason: str = "") -> None:
        super().__init__(
            message=(
                f"Translation to {language_code!r} not available "
                f"for video {video_id}{_detail(reason)}"
            ),
            http_status=400,
        )
        self.video_id = video_id
        self.language_code = language_code


class ParseError(TranscriptError):
    """
    Raised when an upstream payload (caption markup, player JSON, playlist
    page) can't be parsed at all.
    """

    kind = "ParseError"

    def __init__(self, what: str, reason: str = "") -> None:
        super().__init__(
            message=f"Failed to parse {what}{_detail(reason)}",
            http_status=502,
        )


# ---------------------------------------------------------------------------
# Collaborator errors
# ---------------------------------------------------------------------------

class CleanupServiceError(TranscriptError):
    """
    Raised when the external cleanup service (OpenAI) is misconfigured or
    returns an error.  The upstream message is passed through unchanged.
    """

    kind = "CleanupServiceError"

    def __init__(self, message: str) -> None:
        super().__init__(message=message, http_status=502)


class OutputWriteError(TranscriptError):
    """
    Raised when a rendered transcript can't be written to its output path.
    """

    kind = "OutputWriteError"

    def __init__(self, path: str, reason: str = "") -> None:
        super().__init__(
            message=f"Failed to write {path}{_detail(reason)}",
            http_status=500,
        )
        self.path = path
