"""
api.py — FastAPI REST API for yt-captions.

Endpoints:
    GET /transcript/{video}       — Fetch a transcript in any output format.
    GET /transcripts/{video}      — List the caption tracks a video offers.
    GET /playlist/{playlist_id}   — Fetch transcripts for a playlist's videos.
    GET /health                   — Simple health-check for load balancers / monitoring.

Run with:
    uvicorn yt_captions.api:app

The global exception handler catches any TranscriptError and converts it to
the appropriate HTTP response using the status code stored on the exception.
Each request gets its own Session, so consent cookies never leak between
callers.
"""

from __future__ import annotations

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from yt_captions.errors import TranscriptError
from yt_captions.extractor import extract, get_transcript, list_transcripts
from yt_captions.playlist import run_playlist
from yt_captions.resolver import parse_video_id
from yt_captions.session import Session

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

app = FastAPI(
    title="YouTube Captions API",
    description="Fetch YouTube caption tracks as JSON, plain text, Markdown or SRT.",
    version="0.1.0",
)

_FORMAT_PATTERN = "^(json|text|txt|srt|markdown|md)$"


def _languages(lang: str) -> list[str] | None:
    if not lang:
        return None
    return [code.strip() for code in lang.split(",") if code.strip()]


# ---------------------------------------------------------------------------
# Global error handler
# ---------------------------------------------------------------------------

@app.exception_handler(TranscriptError)
async def transcript_error_handler(request: Request, exc: TranscriptError) -> JSONResponse:
    """
    Translate any TranscriptError (or subclass) into an HTTP error response
    whose status code comes from the exception itself.
    """
    return JSONResponse(
        status_code=exc.http_status,
        content={"error": exc.message, "kind": exc.kind},
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

# response_model=None because the response class depends on the format.
# Handlers are plain `def` so the blocking Session runs in FastAPI's threadpool.
@app.get("/transcript/{video}", response_model=None)
def get_transcript_endpoint(
    video: str,
    format: str = Query(
        default="text",
        description="Output format: json, text, txt, srt, markdown or md.",
        pattern=_FORMAT_PATTERN,
    ),
    lang: str = Query(
        default="",
        description="Comma-separated language codes in priority order (e.g. 'de,en').",
    ),
    translate: str | None = Query(
        default=None,
        description="Language code to translate the transcript to.",
    ),
    timestamps: bool = Query(default=False, description="Prefix lines with start times."),
    include_url: bool = Query(default=False, description="Start output with the title and URL."),
) -> PlainTextResponse | JSONResponse:
    """
    Fetch the transcript for a single YouTube video.

    **video** is an 11-character video ID (e.g. `dQw4w9WgXcQ`).
    """
    with Session() as session:
        result = extract(
            video,
            languages=_languages(lang),
            fmt=format,
            translate_to=translate,
            timestamps=timestamps,
            include_url=include_url,
            session=session,
        )
    if format == "json":
        return PlainTextResponse(content=result, media_type="application/json")
    return PlainTextResponse(content=result)


@app.get("/transcripts/{video}")
def list_transcripts_endpoint(video: str) -> JSONResponse:
    """List the caption tracks and translation targets a video offers."""
    video_id = parse_video_id(video)
    with Session() as session:
        catalog = list_transcripts(video_id, session=session)
    return JSONResponse(content={
        "video_id": catalog.video_id,
        "title": catalog.title,
        "tracks": [
            {
                "language_code": track.language_code,
                "language": track.language,
                "is_generated": track.is_generated,
                "is_translatable": track.is_translatable,
            }
            for track in catalog.tracks
        ],
        "translation_languages": [
            {"language_code": lang.language_code, "language": lang.language}
            for lang in catalog.translation_languages
        ],
    })


@app.get("/playlist/{playlist_id}")
def playlist_endpoint(
    playlist_id: str,
    lang: str = Query(default="", description="Comma-separated language codes in priority order."),
    max: int | None = Query(default=None, ge=0, description="Maximum number of videos to process."),
) -> JSONResponse:
    """
    Fetch transcripts for a playlist's videos in listing order.

    Per-video failures are reported inline and never fail the request.
    """
    languages = _languages(lang)
    with Session() as session:
        results = run_playlist(
            session,
            playlist_id,
            lambda video_id: get_transcript(video_id, languages, session=session),
            max_count=max,
        )
    return JSONResponse(content={
        "playlist_id": playlist_id,
        "result_count": len(results),
        "results": [
            {
                "video_id": r.video_id,
                "ok": r.ok,
                "error": r.error.message if r.error else None,
                "error_kind": r.error_kind,
                "language_code": r.transcript.language_code if r.transcript else None,
                "segments": r.transcript.to_raw_data() if r.transcript else None,
            }
            for r in results
        ],
    })


@app.get("/health")
async def health() -> dict:
    """Returns HTTP 200 with {"status": "ok"}."""
    return {"status": "ok"}
