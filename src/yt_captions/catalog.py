"""
catalog.py — The set of caption tracks a video offers, and track selection.

Selection is deterministic and manual-biased: for each requested language in
the caller's order, a human-authored track wins over an auto-generated one,
and only then do we move on to the next requested language.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from yt_captions.errors import NoTranscriptFoundError, TranscriptsDisabledError
from yt_captions.metadata import VideoMetadata
from yt_captions.models import TranscriptTrack, TranslationLanguage


@dataclass(frozen=True)
class TranscriptCatalog:
    """All caption tracks for one video, in upstream order."""
    video_id: str
    title: str | None
    tracks: tuple[TranscriptTrack, ...]
    translation_languages: tuple[TranslationLanguage, ...] = field(default=())

    def __post_init__(self) -> None:
        if not self.tracks:
            raise TranscriptsDisabledError(self.video_id)

    @classmethod
    def from_metadata(cls, metadata: VideoMetadata) -> TranscriptCatalog:
        return cls(
            video_id=metadata.video_id,
            title=metadata.title,
            tracks=metadata.tracks,
            translation_languages=metadata.translation_languages,
        )

    @property
    def manual(self) -> list[TranscriptTrack]:
        return [t for t in self.tracks if not t.is_generated]

    @property
    def generated(self) -> list[TranscriptTrack]:
        return [t for t in self.tracks if t.is_generated]

    def offers_translation_to(self, language_code: str) -> bool:
        return any(lang.language_code == language_code for lang in self.translation_languages)


def select_track(catalog: TranscriptCatalog, languages: list[str] | None = None) -> TranscriptTrack:
    """
    Pick the track to fetch.

    Args:
        catalog:   The video's caption tracks.
        languages: Language codes in descending priority.  Empty or None
                   means "whatever is there, manual first".

    Returns:
        The chosen TranscriptTrack.

    Raises:
        NoTranscriptFoundError: No track matches any requested language.
    """
    manual = catalog.manual
    generated = catalog.generated

    if not languages:
        if manual:
            return manual[0]
        if generated:
            return generated[0]
        raise NoTranscriptFoundError(catalog.video_id)

    for code in languages:
        for subset in (manual, generated):
            for track in subset:
                if track.language_code == code:
                    return track

    raise NoTranscriptFoundError(catalog.video_id, languages)


def list_all(catalog: TranscriptCatalog) -> list[TranscriptTrack]:
    """Every track in upstream order, no selection applied."""
    return list(catalog.tracks)
