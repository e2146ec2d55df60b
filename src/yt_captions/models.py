"""
models.py — Value types shared across the caption pipeline.

Tracks and cues are frozen dataclasses: once built from upstream data they
are never mutated.  A Transcript owns its list of cues and is handed to the
caller that requested it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


def watch_url(video_id: str) -> str:
    """Canonical watch-page URL for a video ID."""
    return WATCH_URL.format(video_id=video_id)


@dataclass(frozen=True)
class TranscriptTrack:
    """
    One caption track offered for a video.

    Attributes:
        language_code:   BCP-47-ish code as YouTube reports it (e.g. "en", "pt-BR").
        language:        Display name (e.g. "English (auto-generated)").
        is_generated:    True for automatic speech recognition tracks.
        is_translatable: True if YouTube can machine-translate this track.
        base_url:        Caption download URL, kept verbatim from upstream.
    """
    language_code: str
    language: str
    is_generated: bool
    is_translatable: bool
    base_url: str


@dataclass(frozen=True)
class TranslationLanguage:
    """A target language the player offers for server-side translation."""
    language_code: str
    language: str


@dataclass(frozen=True)
class CaptionCue:
    """One timed caption unit; times are in seconds."""
    start: float
    duration: float
    text: str

    @property
    def end(self) -> float:
        return self.start + self.duration

    def to_dict(self) -> dict:
        return {"text": self.text, "start": float(self.start), "duration": float(self.duration)}


@dataclass
class Transcript:
    """
    The cues of one caption track of one video, plus enough context to
    render headers and pick output filenames.

    Iterating a Transcript yields its cues in upstream order.
    """
    video_id: str
    title: str | None
    language_code: str
    language: str
    is_generated: bool
    cues: list[CaptionCue] = field(default_factory=list)
    source_url: str = ""

    def __post_init__(self) -> None:
        if not self.source_url:
            self.source_url = watch_url(self.video_id)

    def __iter__(self) -> Iterator[CaptionCue]:
        return iter(self.cues)

    def __len__(self) -> int:
        return len(self.cues)

    def to_raw_data(self) -> list[dict]:
        return [cue.to_dict() for cue in self.cues]
