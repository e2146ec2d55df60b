"""Shared fixtures for the test-suite."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from payloads import CAPTION_XML, WATCH_PAGE, caption_track, player_response
from yt_captions.config import Settings
from yt_captions.session import Session


@pytest.fixture()
def fast_settings() -> Settings:
    """Settings with no inter-request delay."""
    return Settings(delay_ms=0)


@pytest.fixture()
def fake_session(fast_settings: Settings) -> MagicMock:
    """
    A Session double whose get()/post() return canned bodies.

    Tests set `get.side_effect` / `post.return_value` as needed.
    """
    session = MagicMock(spec=Session)
    session.settings = fast_settings
    session.delay_ms = 0
    return session


@pytest.fixture()
def pipeline_session(fake_session: MagicMock) -> MagicMock:
    """
    A fake session wired for one successful single-video pipeline run:
    watch page → player JSON (manual en + generated en) → caption XML.
    """
    def get(url, params=None):
        if "timedtext" in url:
            return CAPTION_XML
        return WATCH_PAGE

    fake_session.get.side_effect = get
    fake_session.post.return_value = json.dumps(player_response([
        caption_track("en", "English"),
        caption_track("en", "English (auto-generated)", generated=True),
    ]))
    return fake_session
