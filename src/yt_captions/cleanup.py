"""
cleanup.py — Optional LLM cleanup of a fetched transcript.

The cue texts are joined into one block, sent to OpenAI's chat completions
API, and the cleaned text comes back as a single cue.  That cue keeps the
first original cue's start and duration, so timestamped formats still get
one sensible leading time.
"""

from __future__ import annotations

import logging

import openai

from yt_captions.config import Settings, settings as default_settings
from yt_captions.errors import CleanupServiceError
from yt_captions.models import CaptionCue, Transcript

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = (
    "You are a helpful assistant that cleans up and improves transcripts while "
    "preserving their original meaning. You remove promotional content like product "
    "mentions, website URLs, course offers, and training programs."
)

_MARKDOWN_INSTRUCTION = (
    "Format the cleaned transcript using Markdown syntax. Use appropriate markdown elements like:\n"
    "- **Bold** for emphasis on important points\n"
    "- *Italics* for subtle emphasis\n"
    "- Headings (##, ###) to organize sections if the transcript has clear topics\n"
    "- Bullet points (-) or numbered lists (1.) for lists\n"
    "- Blockquotes (>) for notable quotes\n"
    "- Line breaks between paragraphs\n"
    "Make it well-structured and readable with proper markdown formatting.\n\n"
)

_USER_PROMPT = (
    "Please clean up and improve the following transcript. "
    "Fix any grammar errors, improve sentence structure, remove filler words and repetitions, "
    "and make it more readable while preserving the original meaning and content. "
    "Do not add any information that wasn't in the original transcript.\n\n"
    "IMPORTANT: Remove all references to products, websites, courses, training programs, "
    "email addresses, social media handles, or any promotional content that the presenter may offer. "
    "Focus only on the educational or informational content.\n\n"
    "{format_instruction}"
    "Transcript:\n\n{text}"
)


def build_prompt(text: str, markdown: bool = False) -> str:
    return _USER_PROMPT.format(
        format_instruction=_MARKDOWN_INSTRUCTION if markdown else "",
        text=text,
    )


class CleanupClient:
    """
    Thin wrapper around the OpenAI client.

    Args:
        api_key:  OpenAI API key.  Falls back to `settings.openai_api_key`
                  (which also reads OPENAI_API_KEY).
        settings: Settings to read the key and model name from.
    """

    def __init__(self, api_key: str | None = None, *, settings: Settings | None = None) -> None:
        settings = settings or default_settings
        api_key = api_key or settings.openai_api_key
        if not api_key:
            raise CleanupServiceError(
                "OpenAI API key not found. Set OPENAI_API_KEY environment variable "
                "or use --openai-key flag"
            )
        self.model = settings.openai_model
        self.client = openai.OpenAI(api_key=api_key)

    def clean(self, text: str, markdown: bool = False) -> str:
        """Return the cleaned version of `text`."""
        logger.info("Sending %d characters to %s for cleanup", len(text), self.model)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": _SYSTEM_PROMPT},
                    {"role": "user", "content": build_prompt(text, markdown)},
                ],
                temperature=0.3,
            )
        except openai.OpenAIError as exc:
            raise CleanupServiceError(f"OpenAI API error: {exc}") from exc

        if not response.choices or not response.choices[0].message.content:
            raise CleanupServiceError("No response from OpenAI API")
        return response.choices[0].message.content.strip()


def transcript_text(transcript: Transcript) -> str:
    """All cue texts joined by spaces, the way the cleanup prompt expects."""
    return " ".join(cue.text for cue in transcript)


def apply_cleanup(transcript: Transcript, cleaned: str) -> Transcript:
    """Replace the cues of `transcript` with one cue holding `cleaned`."""
    first = transcript.cues[0] if transcript.cues else CaptionCue(0.0, 0.0, "")
    return Transcript(
        video_id=transcript.video_id,
        title=transcript.title,
        language_code=transcript.language_code,
        language=transcript.language,
        is_generated=transcript.is_generated,
        cues=[CaptionCue(start=first.start, duration=first.duration, text=cleaned)],
        source_url=transcript.source_url,
    )


def cleanup_transcript(transcript: Transcript, client: CleanupClient, markdown: bool = False) -> Transcript:
    """Clean `transcript` through `client` and return the single-cue result."""
    return apply_cleanup(transcript, client.clean(transcript_text(transcript), markdown))
