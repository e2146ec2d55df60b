"""
cli.py — Command-line interface for yt-captions.

Provides the `ytt` command (registered as a console script in
pyproject.toml).  It fetches one video's transcript, or every video of a
playlist, and writes it to stdout or to files.

Usage examples:
    ytt "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    ytt dQw4w9WgXcQ -l de -l en -f srt -o subs.srt
    ytt dQw4w9WgXcQ --list
    ytt dQw4w9WgXcQ -t fr -f md --url
    ytt "https://www.youtube.com/playlist?list=PL..." -p -m 5 -o transcripts/ -n
"""

from __future__ import annotations

import logging
import os
import sys

import click

from yt_captions.catalog import TranscriptCatalog
from yt_captions.cleanup import CleanupClient, cleanup_transcript
from yt_captions.errors import OutputWriteError, ParseError, TranscriptError
from yt_captions.extractor import get_transcript, list_transcripts
from yt_captions.formatters import EXTENSIONS, FORMATS, render, sanitize_filename
from yt_captions.models import Transcript
from yt_captions.playlist import iter_playlist
from yt_captions.resolver import parse_playlist_id, parse_video_id
from yt_captions.session import Session


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_languages(values: tuple[str, ...]) -> list[str]:
    """Accept both `-l de -l en` and `-l de,en`."""
    languages: list[str] = []
    for value in values:
        languages.extend(code.strip() for code in value.split(",") if code.strip())
    return languages


def _is_directory(path: str) -> bool:
    # A path that doesn't exist yet counts as a directory when it ends with a
    # separator, so `-o out/` works before `out` is created.
    if os.path.exists(path):
        return os.path.isdir(path)
    return path.endswith(("/", os.sep))


def _title_filename(transcript: Transcript, ext: str) -> str:
    if not transcript.title:
        raise ParseError(f"title of video {transcript.video_id}", reason="no title in player response")
    return f"{sanitize_filename(transcript.title)}.{ext}"


def _output_path(
    transcript: Transcript,
    fmt: str,
    output: str | None,
    use_title: bool,
    in_playlist: bool,
) -> str | None:
    """
    Decide where a rendered transcript goes.  None means stdout.

        -o DIR  -n        → DIR/<title>.<ext>
        -o DIR  playlist  → DIR/<video_id>.<ext>
        -o FILE playlist  → FILE's stem + _<video_id> + FILE's suffix
        -o FILE           → FILE
        -n                → ./<title>.<ext>
        playlist          → ./<video_id>.<ext>
    """
    ext = EXTENSIONS[fmt.lower()]

    if output:
        is_dir = _is_directory(output)
        if is_dir and use_title:
            return os.path.join(output, _title_filename(transcript, ext))
        if is_dir and in_playlist:
            return os.path.join(output, f"{transcript.video_id}.{ext}")
        if in_playlist:
            stem, suffix = os.path.splitext(os.path.basename(output))
            parent = os.path.dirname(output) or "."
            return os.path.join(parent, f"{stem or 'output'}_{transcript.video_id}{suffix or '.txt'}")
        return output

    if use_title:
        return _title_filename(transcript, ext)
    if in_playlist:
        return f"{transcript.video_id}.{ext}"
    return None


def _write(text: str, path: str | None) -> None:
    """
    Write `text` to `path`, or to stdout when `path` is None.

    Raises:
        OutputWriteError: If the directory or file can't be written.
    """
    if path is None:
        click.echo(text, nl=False)
        return
    parent = os.path.dirname(path)
    try:
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as exc:
        raise OutputWriteError(path, reason=exc.strerror or str(exc)) from exc
    click.echo(f"Transcript written to {path}", err=True)


def _echo_catalog(catalog: TranscriptCatalog) -> None:
    click.echo(f"Available transcripts for video: {catalog.video_id}")
    click.echo("\nManually created:")
    for track in catalog.manual:
        click.echo(f"  {track.language} ({track.language_code})")
    click.echo("\nAuto-generated:")
    for track in catalog.generated:
        click.echo(f"  {track.language} ({track.language_code})")
    if catalog.translation_languages:
        click.echo("\nTranslation languages:")
        for lang in catalog.translation_languages:
            click.echo(f"  {lang.language} ({lang.language_code})")


# ---------------------------------------------------------------------------
# The `ytt` command
# ---------------------------------------------------------------------------

@click.command()
@click.argument("video", metavar="URL_OR_ID")
@click.option(
    "--lang", "-l",
    "langs",
    multiple=True,
    help="Language code in priority order; repeat or comma-separate (e.g. -l de -l en).",
)
@click.option(
    "--translate", "-t",
    default=None,
    help="Translate the transcript to this language code.",
)
@click.option(
    "--format", "-f",
    "fmt",                           # avoid shadowing the builtin "format"
    type=click.Choice(FORMATS, case_sensitive=False),
    default="text",
    show_default=True,
    help="Output format.",
)
@click.option("--timestamps", is_flag=True, help="Prefix text/markdown lines with start times.")
@click.option("--list", "list_only", is_flag=True, help="List available transcripts instead of fetching.")
@click.option(
    "--delay",
    type=click.IntRange(min=0),
    default=None,
    help="Delay before each request in milliseconds.  [default: 500]",
)
@click.option("--cleanup", is_flag=True, help="Clean up the transcript with ChatGPT.")
@click.option(
    "--openai-key",
    envvar="OPENAI_API_KEY",
    default=None,
    help="OpenAI API key for --cleanup (defaults to $OPENAI_API_KEY).",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Output file or directory (stdout if omitted).",
)
@click.option("--name", "-n", "use_title", is_flag=True, help="Use the video title as the output file name.")
@click.option("--url", "-u", "include_url", is_flag=True, help="Start text/markdown output with the title and URL.")
@click.option("--playlist", "-p", is_flag=True, help="Treat the input as a playlist URL.")
@click.option(
    "--max", "-m",
    "max_count",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of playlist videos to process.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log every request to stderr.")
def main(
    video: str,
    langs: tuple[str, ...],
    translate: str | None,
    fmt: str,
    timestamps: bool,
    list_only: bool,
    delay: int | None,
    cleanup: bool,
    openai_key: str | None,
    output: str | None,
    use_title: bool,
    include_url: bool,
    playlist: bool,
    max_count: int | None,
    verbose: bool,
) -> None:
    """
    Fetch the transcript of a YouTube video (or of every video in a playlist).

    URL_OR_ID can be a watch, short, embed or shorts URL, or an 11-character
    video ID.  With --playlist it must carry a list= parameter.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    fmt = fmt.lower()
    languages = _parse_languages(langs)

    try:
        cleaner = CleanupClient(api_key=openai_key) if cleanup and not list_only else None
    except TranscriptError as exc:
        click.echo(f"Error: {exc.message}", err=True)
        sys.exit(1)

    with Session(delay_ms=delay) as session:

        def process(video_id: str, in_playlist: bool) -> Transcript | None:
            if list_only:
                _echo_catalog(list_transcripts(video_id, session=session))
                return None

            transcript = get_transcript(video_id, languages, translate, session=session)
            rendered_from = transcript
            if cleaner is not None:
                click.echo(f"Cleaning up transcript for {video_id} with ChatGPT...", err=True)
                rendered_from = cleanup_transcript(
                    transcript, cleaner, markdown=fmt in ("markdown", "md"),
                )

            path = _output_path(transcript, fmt, output, use_title, in_playlist)
            text = render(rendered_from, fmt, timestamps=timestamps, include_url=include_url)
            _write(text, path)
            return transcript

        if playlist:
            try:
                playlist_id = parse_playlist_id(video)
                click.echo(f"Fetching video IDs from playlist: {playlist_id}", err=True)
                failed = succeeded = 0
                for result in iter_playlist(
                    session, playlist_id, lambda vid: process(vid, True), max_count,
                ):
                    if result.ok:
                        succeeded += 1
                        click.echo(f"Processed video {result.video_id}", err=True)
                    else:
                        failed += 1
                        click.echo(
                            f"Error processing video {result.video_id}: {result.error.message}",
                            err=True,
                        )
            except TranscriptError as exc:
                click.echo(f"Error: {exc.message}", err=True)
                sys.exit(1)
            click.echo(f"Done: {succeeded} succeeded, {failed} failed", err=True)
            return

        try:
            video_id = parse_video_id(video)
            if not list_only:
                click.echo(f"Fetching transcript for video: {video_id}", err=True)
            process(video_id, False)
        except TranscriptError as exc:
            click.echo(f"Error: {exc.message}", err=True)
            sys.exit(1)
