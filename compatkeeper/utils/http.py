"""
HTTP client utilities for compatkeeper.

Asynchronous client used by the GitHub discovery command. It retries
transport failures and 5xx responses with jittered backoff and understands
GitHub's throttling responses. The held-back engine itself never touches
the network.
"""

from __future__ import annotations

import httpx
import random
import asyncio
from typing import Any, Dict, Optional

from compatkeeper.utils.logger import get_logger
from compatkeeper.__version__ import __version__
from compatkeeper.exceptions import NetworkError
from compatkeeper.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")


def _throttle_delay(response: httpx.Response) -> Optional[int]:
    """Return the seconds to wait before retrying a throttled response.

    GitHub throttles with 429, or with 403 plus ``Retry-After`` for its
    secondary limits. Anything else returns ``None``.
    """
    if response.status_code == 429 or (
        response.status_code == 403 and "Retry-After" in response.headers
    ):
        try:
            return max(0, int(response.headers.get("Retry-After", "1")))
        except ValueError:
            return 1
    return None


def _quota_exhausted(response: httpx.Response) -> bool:
    """True for GitHub's primary rate limit, which only resets on the hour."""
    return (
        response.status_code == 403
        and response.headers.get("X-RateLimit-Remaining") == "0"
    )


class HTTPClient:
    """Asynchronous HTTP client with retries and throttling support.

    Args:
        timeout: Request timeout in seconds.
        max_retries: Retries allowed for transport failures and 5xx responses.
        verify_ssl: Whether to verify SSL certificates.
        user_agent: Custom User-Agent header value.
        headers: Extra headers sent with every request.

    Example:
        >>> async with HTTPClient(headers={"Authorization": "token ..."}) as client:
        ...     repos = await client.get_json("https://api.github.com/user/repos")
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.headers: Dict[str, str] = dict(headers or {})

        self._client: Optional[httpx.AsyncClient] = None
        self._max_429_retries: int = 5

    async def __aenter__(self) -> "HTTPClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                verify=self.verify_ssl,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent, **self.headers},
            )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request, retrying what can succeed on a later attempt.

        Transport errors and 5xx responses use up ``max_retries``. Throttled
        responses wait as instructed and have their own limit. Other 4xx
        responses and an exhausted GitHub quota fail at once.
        """
        await self._ensure_client()
        assert self._client is not None

        attempts = self.max_retries + 1
        attempt = 0
        throttled = 0
        last_exc: Optional[Exception] = None

        while attempt < attempts:
            try:
                response = await self._client.request(method, url, **kwargs)
            except httpx.TransportError as exc:
                last_exc = exc
                logger.warning(
                    "%s on attempt %d/%d: %s",
                    type(exc).__name__,
                    attempt + 1,
                    attempts,
                    url,
                )
            else:
                if response.status_code < 400:
                    return response

                wait = _throttle_delay(response)
                if wait is not None:
                    throttled += 1
                    if throttled > self._max_429_retries:
                        raise NetworkError(
                            f"Rate limit exceeded after {self._max_429_retries} retries",
                            url=url,
                            status_code=response.status_code,
                        )
                    logger.warning(
                        "Throttled (HTTP %d), waiting %ds (%d/%d)",
                        response.status_code,
                        wait,
                        throttled,
                        self._max_429_retries,
                    )
                    await asyncio.sleep(wait)
                    continue

                if _quota_exhausted(response):
                    reset = response.headers.get("X-RateLimit-Reset", "unknown")
                    raise NetworkError(
                        f"GitHub API quota exhausted; resets at epoch {reset}",
                        url=url,
                        status_code=response.status_code,
                    )

                if response.status_code < 500:
                    raise NetworkError(
                        f"HTTP {response.status_code} error for {url}",
                        url=url,
                        status_code=response.status_code,
                        response_body=response.text,
                    )

                logger.warning(
                    "HTTP %d on attempt %d/%d: %s",
                    response.status_code,
                    attempt + 1,
                    attempts,
                    url,
                )

            attempt += 1
            if attempt < attempts:
                delay = (2 ** (attempt - 1)) + random.uniform(0.0, 0.3)
                logger.debug("Backing off %.2fs", delay)
                await asyncio.sleep(delay)

        raise NetworkError(
            f"Request failed after {attempts} attempts: {url}",
            url=url,
        ) from last_exc

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """Perform a GET request with retry logic."""
        return await self._request_with_retry("GET", url, **kwargs)

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        """Fetch a URL and decode the JSON body (object or array)."""
        response = await self.get(url, **kwargs)

        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc
