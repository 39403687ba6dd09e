"""Minimal GitHub REST client with bounded retry on rate limiting."""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from app.version import user_agent
from services.licensed.constants import (
    DEFAULT_API_URL,
    DEFAULT_SECONDARY_RETRY_AFTER,
    GITHUB_API_VERSION,
    GITHUB_JSON_MEDIA_TYPE,
    MAX_RETRY_COUNT,
)
from services.licensed.models import RateLimitError


_LOGGER = logging.getLogger(__name__)

_LINK_PATTERN = re.compile(r'<([^>]+)>\s*;\s*rel="?([^";,]+)"?')


@dataclass(frozen=True)
class GitHubResponse:
    """Status, headers and raw body of a completed request."""

    status: int
    headers: Mapping[str, str]
    body: bytes

    def json(self) -> Any:
        return json.loads(self.body.decode("utf-8"))

    def next_page_url(self) -> str | None:
        return parse_link_header(self.headers.get("Link") or self.headers.get("link")).get("next")


@dataclass(frozen=True)
class RateLimitSignal:
    """Classified rate limit response and the backoff it asks for."""

    secondary: bool
    retry_after: float


def parse_link_header(value: str | None) -> dict[str, str]:
    """Parse a ``Link`` header into a ``{rel: url}`` mapping."""

    if not value:
        return {}
    return {rel: url for url, rel in _LINK_PATTERN.findall(value)}


def classify_rate_limit(
    status: int,
    headers: Mapping[str, str],
    body: bytes,
    *,
    now: Callable[[], float] = time.time,
) -> RateLimitSignal | None:
    """Return a :class:`RateLimitSignal` when the response is a rate limit."""

    if status not in (403, 429):
        return None

    lowered = {key.lower(): value for key, value in headers.items()}
    retry_after = lowered.get("retry-after")
    if retry_after is not None:
        return RateLimitSignal(secondary=True, retry_after=_parse_seconds(retry_after))

    if lowered.get("x-ratelimit-remaining") == "0":
        reset = _parse_seconds(lowered.get("x-ratelimit-reset"))
        return RateLimitSignal(secondary=False, retry_after=max(0.0, reset - now()))

    message = body.decode("utf-8", errors="replace").lower()
    if "secondary rate limit" in message:
        return RateLimitSignal(secondary=True, retry_after=float(DEFAULT_SECONDARY_RETRY_AFTER))
    if status == 429 or "rate limit" in message:
        return RateLimitSignal(secondary=False, retry_after=float(DEFAULT_SECONDARY_RETRY_AFTER))
    return None


def _parse_seconds(raw: str | None) -> float:
    if raw is None:
        return 0.0
    try:
        return max(0.0, float(raw.strip()))
    except ValueError:
        return 0.0


class GitHubClient:
    """Issue GitHub API requests, retrying when rate limited.

    A client created without a token sends unauthenticated requests.  Release
    asset downloads are made through an unauthenticated client.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        max_retries: int = MAX_RETRY_COUNT,
        sleep: Callable[[float], None] = time.sleep,
        now: Callable[[], float] = time.time,
    ) -> None:
        self._token = token or None
        self._api_url = api_url.rstrip("/")
        self._max_retries = max_retries
        self._sleep = sleep
        self._now = now

    @property
    def authenticated(self) -> bool:
        return self._token is not None

    def api_url(self, path: str) -> str:
        return f"{self._api_url}/{path.lstrip('/')}"

    def request(
        self,
        url: str,
        *,
        accept: str = GITHUB_JSON_MEDIA_TYPE,
        raise_for_status: bool = True,
    ) -> GitHubResponse:
        """Perform a ``GET`` request and return the completed response.

        Rate limited responses are retried after the requested backoff up to
        ``max_retries`` times before :class:`RateLimitError` is raised.  Other
        HTTP errors are raised unless ``raise_for_status`` is false, in which
        case the error response is returned.
        """

        retry_count = 0
        while True:
            _LOGGER.debug("HTTP request: GET %s", url)
            try:
                with urlopen(self._build_request(url, accept)) as response:  # nosec - GitHub API over HTTPS
                    return GitHubResponse(
                        status=response.status,
                        headers=dict(response.headers.items()),
                        body=response.read(),
                    )
            except HTTPError as exc:
                headers = dict(exc.headers.items()) if exc.headers is not None else {}
                body = exc.read() or b""
                signal = classify_rate_limit(exc.code, headers, body, now=self._now)
                if signal is None:
                    if raise_for_status:
                        raise
                    return GitHubResponse(status=exc.code, headers=headers, body=body)

                if retry_count >= self._max_retries:
                    _LOGGER.error(
                        "Request was not successful after %d attempts.  Failing",
                        self._max_retries,
                    )
                    raise RateLimitError(
                        f"GitHub rate limit exceeded for {url} after {self._max_retries} retries"
                    ) from exc

                _LOGGER.info(
                    "Request attempt %d %s, retrying after %s seconds",
                    retry_count + 1,
                    "hit secondary rate limits" if signal.secondary else "was rate limited",
                    _format_seconds(signal.retry_after),
                )
                self._sleep(signal.retry_after)
                retry_count += 1

    def get_json(self, url: str) -> Any:
        return self.request(url).json()

    def paginate(self, url: str) -> Iterator[dict]:
        """Yield every object of a paginated list endpoint."""

        next_url: str | None = url
        while next_url is not None:
            response = self.request(next_url)
            for item in response.json():
                if isinstance(item, dict):
                    yield item
            next_url = response.next_page_url()

    def _build_request(self, url: str, accept: str) -> Request:
        headers = {
            "Accept": accept,
            "User-Agent": user_agent(),
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return Request(url, headers=headers)


def _format_seconds(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.1f}"


__all__ = [
    "GitHubClient",
    "GitHubResponse",
    "RateLimitSignal",
    "classify_rate_limit",
    "parse_link_header",
]
