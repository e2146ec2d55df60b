"""
fetcher.py — Download one caption track (optionally translated) and parse it.
"""

from __future__ import annotations

import logging
from urllib.parse import urlencode

from yt_captions.catalog import TranscriptCatalog
from yt_captions.errors import NoTranscriptFoundError, TranslationUnavailableError
from yt_captions.models import Transcript, TranscriptTrack
from yt_captions.parser import parse_captions
from yt_captions.session import Session

logger = logging.getLogger(__name__)


def build_caption_url(track: TranscriptTrack, translate_to: str | None = None) -> str:
    """The track's URL, with a `tlang` parameter added when translating."""
    if not translate_to:
        return track.base_url
    return f"{track.base_url}&{urlencode({'tlang': translate_to})}"


def check_translation(catalog: TranscriptCatalog, track: TranscriptTrack, translate_to: str) -> None:
    """
    Raise TranslationUnavailableError unless `track` can be translated to
    `translate_to`.  A non-translatable track fails whatever the target.
    """
    if not track.is_translatable:
        raise TranslationUnavailableError(
            catalog.video_id, translate_to,
            reason=f"track {track.language_code!r} is not translatable",
        )
    if catalog.translation_languages and not catalog.offers_translation_to(translate_to):
        raise TranslationUnavailableError(
            catalog.video_id, translate_to,
            reason="target language not offered",
        )


def fetch_transcript(
    session: Session,
    catalog: TranscriptCatalog,
    track: TranscriptTrack,
    translate_to: str | None = None,
) -> Transcript:
    """
    Fetch and parse the cues of `track`.

    Args:
        session:      Session to download through.
        catalog:      The catalog `track` came from (video ID, title,
                      available translation targets).
        track:        The track to download.
        translate_to: Optional target language code for server-side
                      translation.

    Returns:
        A Transcript with at least one cue.

    Raises:
        TranslationUnavailableError: Translation requested but not possible.
        NoTranscriptFoundError:      The payload contained no cues.
        ParseError:                  The payload wasn't parsable markup.
    """
    if translate_to:
        check_translation(catalog, track, translate_to)

    url = build_caption_url(track, translate_to)
    logger.debug(
        "Fetching %s captions for %s%s",
        track.language_code, catalog.video_id,
        f" translated to {translate_to}" if translate_to else "",
    )
    cues = parse_captions(session.get(url))
    if not cues:
        raise NoTranscriptFoundError(catalog.video_id, [track.language_code])

    language = track.language
    if translate_to:
        language = next(
            (lang.language for lang in catalog.translation_languages
             if lang.language_code == translate_to),
            translate_to,
        )

    return Transcript(
        video_id=catalog.video_id,
        title=catalog.title,
        language_code=translate_to or track.language_code,
        language=language,
        is_generated=track.is_generated,
        cues=cues,
    )
