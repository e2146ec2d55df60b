"""
test_extractor.py — Tests for the single-video pipeline.

The `pipeline_session` fixture wires a fake Session for one complete run:
watch page → player JSON (manual en + generated en) → caption XML.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from payloads import VIDEO_ID, caption_track, player_response
from yt_captions.errors import (
    InvalidVideoIdError,
    NoTranscriptFoundError,
    TranscriptsDisabledError,
    TranslationUnavailableError,
)
from yt_captions.extractor import extract, get_transcript, list_transcripts


# ---------------------------------------------------------------------------
# list_transcripts
# ---------------------------------------------------------------------------

class TestListTranscripts:
    def test_catalog_built_from_player_response(self, pipeline_session: MagicMock) -> None:
        catalog = list_transcripts(VIDEO_ID, session=pipeline_session)

        assert catalog.video_id == VIDEO_ID
        assert catalog.title == "Never Gonna Give You Up"
        assert len(catalog.manual) == 1
        assert len(catalog.generated) == 1

    def test_no_captions(self, fake_session: MagicMock) -> None:
        fake_session.get.return_value = '"INNERTUBE_API_KEY": "k"'
        fake_session.post.return_value = json.dumps(player_response(tracks=None))
        with pytest.raises(TranscriptsDisabledError):
            list_transcripts(VIDEO_ID, session=fake_session)

    @patch("yt_captions.extractor.Session")
    def test_creates_session_when_omitted(self, mock_session_cls: MagicMock, pipeline_session: MagicMock) -> None:
        mock_session_cls.return_value = pipeline_session
        list_transcripts(VIDEO_ID)
        mock_session_cls.assert_called_once_with()


# ---------------------------------------------------------------------------
# get_transcript
# ---------------------------------------------------------------------------

class TestGetTranscript:
    """Tests for get_transcript() end to end over a fake session."""

    def test_manual_track_preferred(self, pipeline_session: MagicMock) -> None:
        transcript = get_transcript(VIDEO_ID, ["en"], session=pipeline_session)

        assert transcript.is_generated is False
        assert transcript.language == "English"
        assert [c.text for c in transcript] == ["Hello world", "This is a transcript"]

    def test_requests_in_pipeline_order(self, pipeline_session: MagicMock) -> None:
        get_transcript(VIDEO_ID, session=pipeline_session)

        urls = [c.args[0] for c in pipeline_session.get.call_args_list]
        assert urls[0] == f"https://www.youtube.com/watch?v={VIDEO_ID}"
        assert "timedtext" in urls[1]
        assert pipeline_session.post.call_count == 1

    def test_language_not_available(self, pipeline_session: MagicMock) -> None:
        with pytest.raises(NoTranscriptFoundError):
            get_transcript(VIDEO_ID, ["ja"], session=pipeline_session)

    def test_translation(self, pipeline_session: MagicMock) -> None:
        transcript = get_transcript(VIDEO_ID, ["en"], translate_to="de", session=pipeline_session)

        assert transcript.language_code == "de"
        assert pipeline_session.get.call_args_list[-1].args[0].endswith("&tlang=de")

    def test_translation_of_untranslatable_track(self, fake_session: MagicMock) -> None:
        fake_session.get.return_value = '"INNERTUBE_API_KEY": "k"'
        fake_session.post.return_value = json.dumps(player_response([
            caption_track("en", "English", translatable=False),
        ]))
        with pytest.raises(TranslationUnavailableError):
            get_transcript(VIDEO_ID, translate_to="fr", session=fake_session)


# ---------------------------------------------------------------------------
# extract
# ---------------------------------------------------------------------------

class TestExtract:
    """Tests for the one-call extract() interface."""

    def test_url_input_rendered_as_text(self, pipeline_session: MagicMock) -> None:
        out = extract(f"https://youtu.be/{VIDEO_ID}", session=pipeline_session)
        assert out == "Hello world\nThis is a transcript\n"

    def test_srt(self, pipeline_session: MagicMock) -> None:
        out = extract(VIDEO_ID, fmt="srt", session=pipeline_session)
        assert out.startswith("1\n00:00:00,000 --> 00:00:02,500\nHello world\n")

    def test_markdown_with_url(self, pipeline_session: MagicMock) -> None:
        out = extract(VIDEO_ID, fmt="md", include_url=True, session=pipeline_session)
        assert out.startswith(
            f"![Never Gonna Give You Up](https://www.youtube.com/watch?v={VIDEO_ID})\n\n# Transcript"
        )

    def test_unknown_format_before_any_request(self, pipeline_session: MagicMock) -> None:
        with pytest.raises(ValueError):
            extract(VIDEO_ID, fmt="docx", session=pipeline_session)
        pipeline_session.get.assert_not_called()

    def test_invalid_reference_before_any_request(self, pipeline_session: MagicMock) -> None:
        with pytest.raises(InvalidVideoIdError):
            extract("https://vimeo.com/1", session=pipeline_session)
        pipeline_session.get.assert_not_called()


# ---------------------------------------------------------------------------
# Live network (opt-in with -m integration)
# ---------------------------------------------------------------------------

@pytest.mark.integration
class TestLive:
    def test_fetch_real_video(self) -> None:
        transcript = get_transcript("jNQXAC9IVRw", ["en"])
        assert len(transcript) > 0
        assert transcript.title
