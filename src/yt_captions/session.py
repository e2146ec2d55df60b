"""
session.py — The one HTTP client every pipeline step goes through.

A Session owns a `requests.Session` (and therefore its cookie jar), pauses
for a fixed delay before every outbound request, and knows how to get past
YouTube's GDPR consent interstitial:

    1. send the request
    2. classify the response (consent page? bot challenge?)
    3. on a consent page, store a synthetic CONSENT cookie in the jar
    4. re-send the original request exactly once

If the retried request still lands on the consent page, or any response
carries a bot-challenge marker, the call fails with RequestBlockedError.
Only one request is ever in flight, so the jar needs no locking.
"""

from __future__ import annotations

import logging
import re
import time
from urllib.parse import urlparse

import requests

from yt_captions.config import Settings, settings as default_settings
from yt_captions.errors import IpBlockedError, NetworkError, RequestBlockedError

logger = logging.getLogger(__name__)

# The consent form carries a hidden "v" input whose value the cookie echoes.
_CONSENT_VALUE_PATTERN = re.compile(r'name="v" value="(.*?)"')

# Used when the interstitial was a redirect we can't read a value from.
_FALLBACK_CONSENT_VALUE = "cb"

_COOKIE_DOMAIN = ".youtube.com"


def _contains_any(body: str | None, markers: list[str]) -> bool:
    """Case-insensitive substring match of any marker against `body`."""
    lowered = (body or "").lower()
    return any(marker.lower() in lowered for marker in markers)


class Session:
    """
    Blocking HTTP session with a fixed inter-request delay and a one-shot
    consent retry.

    Args:
        delay_ms: Pause before each request in milliseconds.  Defaults to
                  `settings.delay_ms` (500).
        settings: Settings to read timeouts, headers and markers from.
        http:     An existing `requests.Session` to wrap (mainly for tests).
    """

    def __init__(
        self,
        delay_ms: int | None = None,
        *,
        settings: Settings | None = None,
        http: requests.Session | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self.delay_ms = self.settings.delay_ms if delay_ms is None else delay_ms
        if self.delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {self.delay_ms}")
        self._http = http if http is not None else requests.Session()
        self._http.headers.update({
            "User-Agent": self.settings.user_agent,
            "Accept-Language": self.settings.accept_language,
        })

    # -- public API ---------------------------------------------------------

    @property
    def cookies(self) -> requests.cookies.RequestsCookieJar:
        return self._http.cookies

    def pause(self) -> None:
        """Sleep for the configured delay.  Not adaptive; always the same."""
        if self.delay_ms:
            time.sleep(self.delay_ms / 1000)

    def get(self, url: str, params: dict | None = None) -> str:
        """GET `url` and return the response body as text."""
        return self._request("GET", url, params=params)

    def post(self, url: str, json_body: dict, params: dict | None = None) -> str:
        """POST `json_body` as JSON to `url` and return the response body as text."""
        return self._request("POST", url, params=params, json=json_body)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -- request / classify / retry ----------------------------------------

    def _request(self, method: str, url: str, **kwargs) -> str:
        response = self._send(method, url, **kwargs)

        if self._is_consent_interstitial(response):
            logger.info("Consent interstitial for %s; retrying with consent cookie", url)
            self._accept_consent(response.text)
            response = self._send(method, url, **kwargs)
            if self._is_consent_interstitial(response):
                raise RequestBlockedError(url, reason="consent page served again after retry")

        if self._is_bot_challenge(response):
            raise RequestBlockedError(url, reason="bot challenge page")

        return response.text

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        self.pause()
        logger.debug("%s %s", method, url)
        try:
            response = self._http.request(
                method, url, timeout=self.settings.request_timeout, **kwargs
            )
        except requests.Timeout as exc:
            raise NetworkError(
                url, reason=f"timed out after {self.settings.request_timeout}s"
            ) from exc
        except requests.RequestException as exc:
            raise NetworkError(url, reason=str(exc)) from exc

        if response.status_code in self.settings.ip_blocked_statuses:
            raise IpBlockedError(url, status_code=response.status_code)

        try:
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise NetworkError(url, reason=str(exc)) from exc

        return response

    def _is_consent_interstitial(self, response: requests.Response) -> bool:
        host = urlparse(response.url or "").netloc.lower()
        if any(host == consent_host.lower() for consent_host in self.settings.consent_hosts):
            return True
        return _contains_any(response.text, self.settings.consent_markers)

    def _is_bot_challenge(self, response: requests.Response) -> bool:
        return _contains_any(response.text, self.settings.bot_challenge_markers)

    def _accept_consent(self, body: str) -> None:
        match = _CONSENT_VALUE_PATTERN.search(body or "")
        value = match.group(1) if match else _FALLBACK_CONSENT_VALUE
        self._http.cookies.set("CONSENT", f"YES+{value}", domain=_COOKIE_DOMAIN)
