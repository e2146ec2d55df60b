"""
test_parser.py — Tests for timed-text XML parsing.
"""

from __future__ import annotations

import pytest

from yt_captions.errors import ParseError
from yt_captions.parser import clean_text, parse_captions


def _transcript(*texts: str) -> str:
    return "<transcript>" + "".join(texts) + "</transcript>"


# ---------------------------------------------------------------------------
# Classic <text> format
# ---------------------------------------------------------------------------

class TestClassicFormat:
    """Tests for <text start dur> payloads (seconds)."""

    def test_cues_in_document_order(self) -> None:
        payload = _transcript(
            '<text start="0.0" dur="2.5">Hello world</text>',
            '<text start="2.5" dur="3.1">Second line</text>',
        )
        cues = parse_captions(payload)

        assert [c.text for c in cues] == ["Hello world", "Second line"]
        assert cues[0].start == 0.0
        assert cues[0].duration == 2.5
        assert cues[1].start == 2.5
        assert cues[1].end == pytest.approx(5.6)

    def test_named_entities_decoded(self) -> None:
        payload = _transcript('<text start="0" dur="1">Tom &amp;amp; Jerry &amp;quot;live&amp;quot;</text>')
        assert parse_captions(payload)[0].text == 'Tom & Jerry "live"'

    def test_numeric_entities_decoded(self) -> None:
        payload = _transcript('<text start="0" dur="1">it&amp;#39;s &amp;#x263A;</text>')
        assert parse_captions(payload)[0].text == "it's ☺"

    def test_escaped_angle_brackets_kept(self) -> None:
        """Literal < and > in the caption text are never mistaken for a tag."""
        payload = _transcript('<text start="0" dur="1">5 &amp;lt; 6 and 7 &amp;gt; 3</text>')
        assert parse_captions(payload)[0].text == "5 < 6 and 7 > 3"

    def test_inline_markup_stripped(self) -> None:
        payload = _transcript(
            '<text start="0" dur="1">&lt;font color=&quot;#E5E5E5&quot;&gt;quiet&lt;/font&gt; loud</text>'
        )
        assert parse_captions(payload)[0].text == "quiet loud"

    def test_line_breaks_become_spaces(self) -> None:
        payload = _transcript('<text start="0" dur="1">line one\nline two</text>')
        assert parse_captions(payload)[0].text == "line one line two"

    def test_empty_cue_skipped(self) -> None:
        payload = _transcript(
            '<text start="0" dur="1">   </text>',
            '<text start="1" dur="1"></text>',
            '<text start="2" dur="1">kept</text>',
        )
        cues = parse_captions(payload)
        assert [c.text for c in cues] == ["kept"]
        assert cues[0].start == 2.0

    def test_missing_duration_is_zero(self) -> None:
        cue = parse_captions(_transcript('<text start="4.2">no dur</text>'))[0]
        assert cue.duration == 0.0

    def test_no_cues(self) -> None:
        assert parse_captions("<transcript></transcript>") == []


# ---------------------------------------------------------------------------
# srv3 <p> format
# ---------------------------------------------------------------------------

class TestSrv3Format:
    """Tests for <p t d> payloads (milliseconds)."""

    def test_milliseconds_converted(self) -> None:
        payload = (
            '<timedtext format="3"><body>'
            '<p t="1200" d="3400">Hello there</p>'
            "</body></timedtext>"
        )
        cue = parse_captions(payload)[0]
        assert cue.start == pytest.approx(1.2)
        assert cue.duration == pytest.approx(3.4)
        assert cue.text == "Hello there"

    def test_word_segments_joined(self) -> None:
        payload = (
            '<timedtext format="3"><body>'
            '<p t="0" d="2000"><s>Hello</s><s t="500"> big</s><s t="900">world</s></p>'
            "</body></timedtext>"
        )
        assert parse_captions(payload)[0].text == "Hello big world"

    def test_br_is_a_space(self) -> None:
        payload = '<timedtext><body><p t="0" d="1000">one<br/>two</p></body></timedtext>'
        assert parse_captions(payload)[0].text == "one two"


# ---------------------------------------------------------------------------
# Errors and helpers
# ---------------------------------------------------------------------------

class TestParseErrors:
    def test_malformed_xml_raises(self) -> None:
        with pytest.raises(ParseError):
            parse_captions("<transcript><text start='0'>unclosed</transcript>")

    def test_html_page_raises(self) -> None:
        """A consent or error page in place of captions is not XML."""
        with pytest.raises(ParseError):
            parse_captions("<!DOCTYPE html><html><body><br></body></html>")


class TestCleanText:
    @pytest.mark.parametrize("raw, expected", [
        ("a &amp; b", "a & b"),
        ("&lt;3", "<3"),
        ("a &lt;b&gt; c", "a <b> c"),
        ("  spaced\n\tout  ", "spaced out"),
        ("<i>italic</i> text", "italic text"),
        ("", ""),
    ])
    def test_clean_text(self, raw: str, expected: str) -> None:
        assert clean_text(raw) == expected
