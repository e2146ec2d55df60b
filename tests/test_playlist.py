"""
test_playlist.py — Tests for playlist listing and sequential processing.

The fake Session serves a canned playlist page (ytInitialData embedded in a
script tag) and canned browse-endpoint continuations.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock, call

import pytest

from yt_captions.errors import (
    ParseError,
    TranscriptsDisabledError,
    VideoUnavailableError,
)
from yt_captions.models import CaptionCue, Transcript
from yt_captions.playlist import (
    BROWSE_URL,
    PLAYLIST_URL,
    iter_playlist,
    list_playlist_video_ids,
    run_playlist,
)

PLAYLIST_ID = "PLtest123"


def _video_id(n: int) -> str:
    return f"vid{n:08d}"


def _entries(ids: list[str], token: str | None = None) -> list[dict]:
    items: list[dict] = [{"playlistVideoRenderer": {"videoId": vid}} for vid in ids]
    if token:
        items.append({
            "continuationItemRenderer": {
                "continuationEndpoint": {"continuationCommand": {"token": token}},
            },
        })
    return items


def _page(ids: list[str], token: str | None = None, alerts: list | None = None) -> str:
    data: dict = {
        "contents": {
            "playlistVideoListRenderer": {"contents": _entries(ids, token)},
        },
    }
    if alerts:
        data["alerts"] = alerts
    return (
        "<html><script>var ytInitialData = "
        + json.dumps(data)
        + ';</script><script>ytcfg.set({"INNERTUBE_API_KEY": "AIzaPlaylistKey"});</script></html>'
    )


def _continuation(ids: list[str], token: str | None = None) -> str:
    return json.dumps({
        "onResponseReceivedActions": [
            {"appendContinuationItemsAction": {"continuationItems": _entries(ids, token)}},
        ],
    })


def _transcript(video_id: str) -> Transcript:
    return Transcript(
        video_id=video_id,
        title=f"Video {video_id}",
        language_code="en",
        language="English",
        is_generated=False,
        cues=[CaptionCue(0.0, 1.0, "hi")],
    )


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------

class TestListPlaylist:
    """Tests for list_playlist_video_ids()."""

    def test_single_page(self, fake_session: MagicMock) -> None:
        ids = [_video_id(n) for n in range(3)]
        fake_session.get.return_value = _page(ids)

        assert list_playlist_video_ids(fake_session, PLAYLIST_ID) == ids
        fake_session.get.assert_called_once_with(PLAYLIST_URL, params={"list": PLAYLIST_ID})
        fake_session.post.assert_not_called()

    def test_follows_continuations(self, fake_session: MagicMock) -> None:
        fake_session.get.return_value = _page([_video_id(0), _video_id(1)], token="tok-1")
        fake_session.post.side_effect = [
            _continuation([_video_id(2)], token="tok-2"),
            _continuation([_video_id(3)]),
        ]

        ids = list_playlist_video_ids(fake_session, PLAYLIST_ID)

        assert ids == [_video_id(n) for n in range(4)]
        assert fake_session.post.call_count == 2
        args, kwargs = fake_session.post.call_args_list[0]
        assert args[0] == BROWSE_URL
        assert args[1]["continuation"] == "tok-1"
        assert args[1]["context"]["client"]["clientName"] == "WEB"
        assert kwargs["params"] == {"key": "AIzaPlaylistKey"}

    def test_duplicates_dropped(self, fake_session: MagicMock) -> None:
        fake_session.get.return_value = _page([_video_id(0), _video_id(1)], token="tok")
        fake_session.post.return_value = _continuation([_video_id(1), _video_id(2)])

        assert list_playlist_video_ids(fake_session, PLAYLIST_ID) == [
            _video_id(0), _video_id(1), _video_id(2),
        ]

    def test_repeated_token_stops(self, fake_session: MagicMock) -> None:
        """A continuation that hands back the same token ends the listing."""
        fake_session.get.return_value = _page([_video_id(0)], token="loop")
        fake_session.post.return_value = _continuation([_video_id(1)], token="loop")

        assert list_playlist_video_ids(fake_session, PLAYLIST_ID) == [_video_id(0), _video_id(1)]
        assert fake_session.post.call_count == 1

    def test_missing_initial_data(self, fake_session: MagicMock) -> None:
        fake_session.get.return_value = "<html><body>nothing</body></html>"
        with pytest.raises(ParseError):
            list_playlist_video_ids(fake_session, PLAYLIST_ID)

    def test_bad_continuation_json(self, fake_session: MagicMock) -> None:
        fake_session.get.return_value = _page([_video_id(0)], token="tok")
        fake_session.post.return_value = "<html>"
        with pytest.raises(ParseError):
            list_playlist_video_ids(fake_session, PLAYLIST_ID)

    def test_error_alert_is_unavailable(self, fake_session: MagicMock) -> None:
        """A private or missing playlist shows an ERROR alert instead of entries."""
        alerts = [{
            "alertRenderer": {
                "type": "ERROR",
                "text": {"runs": [{"text": "The playlist does not exist."}]},
            },
        }]
        fake_session.get.return_value = _page([], alerts=alerts)
        with pytest.raises(VideoUnavailableError, match="does not exist"):
            list_playlist_video_ids(fake_session, PLAYLIST_ID)

    def test_info_alert_is_ignored(self, fake_session: MagicMock) -> None:
        alerts = [{"alertWithButtonRenderer": {"type": "INFO", "text": {"simpleText": "Hidden videos"}}}]
        fake_session.get.return_value = _page([_video_id(0)], alerts=alerts)
        assert list_playlist_video_ids(fake_session, PLAYLIST_ID) == [_video_id(0)]


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

class TestIterPlaylist:
    """Tests for iter_playlist() / run_playlist()."""

    def test_max_count_limits_in_order(self, fake_session: MagicMock) -> None:
        """A 10-video playlist with max_count=5 yields the first five, in order."""
        ids = [_video_id(n) for n in range(10)]
        fake_session.get.return_value = _page(ids)
        process = MagicMock(side_effect=_transcript)

        results = run_playlist(fake_session, PLAYLIST_ID, process, max_count=5)

        assert [r.video_id for r in results] == ids[:5]
        assert all(r.ok for r in results)
        assert process.call_args_list == [call(vid) for vid in ids[:5]]

    def test_one_failure_does_not_stop_the_rest(self, fake_session: MagicMock) -> None:
        ids = [_video_id(n) for n in range(3)]
        fake_session.get.return_value = _page(ids)

        def process(video_id: str) -> Transcript:
            if video_id == ids[1]:
                raise TranscriptsDisabledError(video_id)
            return _transcript(video_id)

        results = run_playlist(fake_session, PLAYLIST_ID, process)

        assert [r.ok for r in results] == [True, False, True]
        assert results[1].error_kind == "TranscriptsDisabled"
        assert results[1].transcript is None
        assert results[2].transcript.video_id == ids[2]

    def test_delay_before_each_entry(self, fake_session: MagicMock) -> None:
        fake_session.get.return_value = _page([_video_id(0), _video_id(1)])
        run_playlist(fake_session, PLAYLIST_ID, _transcript)
        assert fake_session.pause.call_count == 2

    def test_zero_max_count(self, fake_session: MagicMock) -> None:
        fake_session.get.return_value = _page([_video_id(0)])
        process = MagicMock()
        assert run_playlist(fake_session, PLAYLIST_ID, process, max_count=0) == []
        process.assert_not_called()

    def test_negative_max_count(self, fake_session: MagicMock) -> None:
        with pytest.raises(ValueError):
            list(iter_playlist(fake_session, PLAYLIST_ID, _transcript, max_count=-1))

    def test_non_transcript_errors_propagate(self, fake_session: MagicMock) -> None:
        """Only TranscriptErrors are captured per entry."""
        fake_session.get.return_value = _page([_video_id(0)])
        process = MagicMock(side_effect=RuntimeError("boom"))
        with pytest.raises(RuntimeError):
            run_playlist(fake_session, PLAYLIST_ID, process)

    def test_listing_failure_propagates(self, fake_session: MagicMock) -> None:
        fake_session.get.return_value = "no data"
        with pytest.raises(ParseError):
            run_playlist(fake_session, PLAYLIST_ID, _transcript)
