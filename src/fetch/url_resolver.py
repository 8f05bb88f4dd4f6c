# src/fetch/url_resolver.py — v1
"""URL resolver: validate, probe, follow redirects, fetch into a ContentUnit.

Three failure kinds stay distinct for the caller:
    InvalidUrl        malformed URL or non-http(s) scheme (no network call)
    ContentTooLarge   declared or streamed size above the limit
    RemoteFetchError  transport error, non-2xx status or missing content type
"""

from __future__ import annotations

import logging
from email.utils import parsedate_to_datetime

import httpx

from accessibilityhub.core.errors import ContentTooLarge, InvalidUrl, RemoteFetchError
from accessibilityhub.core.models import ContentUnit

logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 50 * 1024 * 1024
FALLBACK_NAME = "downloaded-file"


class UrlResolver:
    """Materializes remote content for the processing pipeline.

    Args:
        client: Pre-built httpx.AsyncClient. One with redirect following,
            timeout and user agent is created lazily when None.
        max_bytes: Largest accepted body.
        timeout: Per-request timeout in seconds.
        user_agent: User-Agent header for owned clients.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        max_bytes: int = DEFAULT_MAX_BYTES,
        timeout: float = 30.0,
        user_agent: str = "AccessibilityHub/0.1",
    ) -> None:
        self._max_bytes = max_bytes
        self._timeout = timeout
        self._user_agent = user_agent
        self.__client = client

    @property
    def _client(self) -> httpx.AsyncClient:
        if self.__client is None:
            self.__client = httpx.AsyncClient(
                follow_redirects=True,
                timeout=httpx.Timeout(self._timeout),
                headers={"User-Agent": self._user_agent},
            )
        return self.__client

    async def resolve(self, url: str) -> ContentUnit:
        """Fetch ``url`` and wrap the body as a ContentUnit."""
        target = validate_url(url)

        try:
            probe = await self._client.head(target, follow_redirects=True)
        except httpx.HTTPError as e:
            logger.error("URL probe failed for %s: %s", url, e)
            raise RemoteFetchError(f"failed to fetch URL: {e}") from e
        if probe.is_error:
            raise RemoteFetchError(f"failed to fetch URL: HTTP {probe.status_code}")

        declared_type = probe.headers.get("content-type")
        if not declared_type:
            raise RemoteFetchError("failed to fetch URL: remote content type unknown")
        self._check_declared_size(probe.headers.get("content-length"))

        final_url = probe.url
        if final_url != target:
            logger.info("Redirected %s -> %s", url, final_url)

        data, response = await self._fetch_body(final_url)
        media_type = response.headers.get("content-type") or declared_type

        return ContentUnit.from_bytes(
            data,
            media_type,
            name=file_name_from_url(response.url),
            last_modified=_parse_last_modified(
                response.headers.get("last-modified") or probe.headers.get("last-modified")
            ),
        )

    async def close(self) -> None:
        if self.__client is not None:
            await self.__client.aclose()
            self.__client = None

    def _check_declared_size(self, content_length: str | None) -> None:
        if not content_length:
            return
        try:
            declared = int(content_length)
        except ValueError:
            return
        if declared > self._max_bytes:
            raise ContentTooLarge("file size exceeds limit")

    async def _fetch_body(self, url: httpx.URL) -> tuple[bytes, httpx.Response]:
        chunks: list[bytes] = []
        received = 0
        try:
            async with self._client.stream("GET", url, follow_redirects=True) as response:
                if response.is_error:
                    raise RemoteFetchError(f"failed to fetch URL: HTTP {response.status_code}")
                async for chunk in response.aiter_bytes():
                    received += len(chunk)
                    if received > self._max_bytes:
                        raise ContentTooLarge("file size exceeds limit")
                    chunks.append(chunk)
        except httpx.HTTPError as e:
            logger.error("URL fetch failed for %s: %s", url, e)
            raise RemoteFetchError(f"failed to fetch URL: {e}") from e
        return b"".join(chunks), response


def validate_url(url: str) -> httpx.URL:
    """Parse ``url``; raise InvalidUrl unless it is absolute http(s) with a host."""
    try:
        parsed = httpx.URL(url.strip())
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidUrl() from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidUrl()
    return parsed


def file_name_from_url(url: httpx.URL) -> str:
    """Last non-empty path segment, or FALLBACK_NAME."""
    segment = url.path.rstrip("/").rsplit("/", 1)[-1]
    return segment or FALLBACK_NAME


def _parse_last_modified(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(parsedate_to_datetime(value).timestamp() * 1000)
    except (TypeError, ValueError):
        return None
