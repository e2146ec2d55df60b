"""
parser.py — Parse YouTube's timed-text XML into CaptionCues.

Two dialects show up in practice:

    <transcript><text start="1.2" dur="3.4">Hello &amp;amp; bye</text></transcript>
        classic format; times in seconds, text is HTML-escaped a second time.

    <timedtext format="3"><body><p t="1200" d="3400"><s>Hello</s><s> bye</s></p></body></timedtext>
        srv3 format; times in milliseconds, words wrapped in <s> elements.

Both are handled; cues come back in document order.
"""

from __future__ import annotations

import html
import re
from xml.etree import ElementTree

from yt_captions.errors import ParseError
from yt_captions.models import CaptionCue

# Inline formatting that survives the first (XML) unescape, e.g. <font color="#E5E5E5">.
_TAG_PATTERN = re.compile(r"<[^>]*>")

# Children of <p> that separate words.
_WORD_BREAK_TAGS = {"s", "br"}


def _float_attr(element: ElementTree.Element, name: str, scale: float = 1.0) -> float:
    raw = element.get(name)
    if raw is None:
        return 0.0
    try:
        value = float(raw) / scale
    except ValueError:
        return 0.0
    return max(value, 0.0)


def clean_text(raw: str) -> str:
    """
    Drop inline markup, decode entities, and turn line breaks into spaces.

    Tags are stripped before decoding so that escaped angle brackets in the
    caption text (`5 &lt; 6`) come out as literal characters.  html.unescape
    covers the named entities (&amp; &lt; &gt; &quot; &apos;) as well as
    decimal and hex character references.
    """
    text = _TAG_PATTERN.sub("", raw)
    text = html.unescape(text)
    return " ".join(text.split())


def _text_of_p(element: ElementTree.Element) -> str:
    parts = [element.text or ""]
    for child in element:
        if child.tag in _WORD_BREAK_TAGS:
            parts.append(" ")
        parts.append("".join(child.itertext()))
        parts.append(child.tail or "")
    return "".join(parts)


def parse_captions(payload: str) -> list[CaptionCue]:
    """
    Parse a caption payload into cues.

    Cues whose text is empty after cleaning are skipped.  An empty result is
    returned as an empty list; deciding whether that's an error is up to the
    caller.

    Raises:
        ParseError: If the payload isn't well-formed XML.
    """
    try:
        root = ElementTree.fromstring(payload)
    except ElementTree.ParseError as exc:
        raise ParseError("caption payload", reason=str(exc)) from exc

    cues: list[CaptionCue] = []
    for element in root.iter():
        if element.tag == "text":
            start = _float_attr(element, "start")
            duration = _float_attr(element, "dur")
            raw = "".join(element.itertext())
        elif element.tag == "p":
            start = _float_attr(element, "t", scale=1000.0)
            duration = _float_attr(element, "d", scale=1000.0)
            raw = _text_of_p(element)
        else:
            continue

        text = clean_text(raw)
        if text:
            cues.append(CaptionCue(start=start, duration=duration, text=text))

    return cues
