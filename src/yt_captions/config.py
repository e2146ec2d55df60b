"""
config.py — Runtime settings for yt-captions.

Uses pydantic-settings so every knob can be tuned from the environment
(prefix `YTT_`) or a `.env` file without code changes.  The classification
markers live here rather than in the session / metadata code because the
upstream pages and reason strings change without notice.

Environment variables (all optional):
    YTT_DELAY_MS                 Pause before every request, in ms (500).
    YTT_REQUEST_TIMEOUT          Per-request timeout in seconds (30).
    YTT_USER_AGENT               User-Agent header for all requests.
    YTT_ACCEPT_LANGUAGE          Accept-Language header (en-US).
    YTT_INNERTUBE_CLIENT_NAME    Client name sent to the player endpoint.
    YTT_INNERTUBE_CLIENT_VERSION Client version sent to the player endpoint.
    YTT_IP_BLOCKED_STATUSES      JSON list of HTTP statuses meaning "IP blocked".
    YTT_OPENAI_MODEL             Model used by the cleanup service.
    OPENAI_API_KEY               API key for the cleanup service.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Marker lists are matched as case-insensitive substrings.
    """

    # ========== Request pacing ==========

    delay_ms: int = Field(default=500, ge=0)
    request_timeout: float = Field(default=30.0, gt=0)

    # ========== Request headers ==========

    user_agent: str = (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )
    accept_language: str = "en-US"

    # ========== Player endpoint client context ==========

    innertube_client_name: str = "ANDROID"
    innertube_client_version: str = "20.10.38"

    # Playlist browse continuations only work with the web client.
    browse_client_name: str = "WEB"
    browse_client_version: str = "2.20240726.00.00"

    # ========== Blocking / consent classification ==========

    ip_blocked_statuses: list[int] = [403, 429]
    consent_markers: list[str] = ['action="https://consent.youtube.com/s"']
    consent_hosts: list[str] = ["consent.youtube.com", "consent.google.com"]
    bot_challenge_markers: list[str] = ['class="g-recaptcha"']

    # ========== Playability reason classification ==========

    bot_detected_reasons: list[str] = ["not a bot"]
    age_restricted_reasons: list[str] = [
        "inappropriate for some users",
        "confirm your age",
        "age-restricted",
    ]
    unavailable_reasons: list[str] = ["unavailable", "private", "removed"]
    transcripts_disabled_reasons: list[str] = ["captions are disabled", "subtitles are disabled"]

    # ========== Cleanup service ==========

    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("YTT_OPENAI_API_KEY", "OPENAI_API_KEY", "openai_api_key"),
    )
    openai_model: str = "gpt-4o-mini"

    model_config = SettingsConfigDict(
        env_prefix="YTT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


# Global settings instance, loaded once from the environment.
settings = Settings()
