"""
Fetcher - One outbound GET per call, with a fixed browser identity
===================================================================
Wraps an httpx client configured from FetchConfig. No retries and no
rate limiting: a failed endpoint is simply reported to the caller, which
decides whether to fall back or give up.

Errors:
- NetworkError: non-2xx status, DNS failure, refused connection, timeout
- MalformedResponseError: JSON expected but the body is not JSON, or the
  expected top-level field is missing
Both derive from FetchError so collectors can treat them the same way.
"""

import os
import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

# Default configuration
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
DEFAULT_TIMEOUT = 30
DEFAULT_WORKERS = 5


# =============================================================================
# ERRORS
# =============================================================================

class FetchError(Exception):
    """An upstream endpoint could not be used."""

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class NetworkError(FetchError):
    pass


class MalformedResponseError(FetchError):
    pass


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass
class FetchConfig:
    """Per-client request settings."""

    user_agent: str = DEFAULT_USER_AGENT
    timeout: Optional[float] = DEFAULT_TIMEOUT
    http2: bool = True
    max_workers: int = DEFAULT_WORKERS

    @classmethod
    def from_env(cls) -> "FetchConfig":
        """
        Build a config from SCRAPER_USER_AGENT, SCRAPER_TIMEOUT and
        SCRAPER_WORKERS, keeping defaults for anything unset.
        SCRAPER_TIMEOUT=0 (or 'none') disables the timeout.
        """
        config = cls()
        user_agent = os.environ.get("SCRAPER_USER_AGENT")
        if user_agent:
            config.user_agent = user_agent

        timeout = os.environ.get("SCRAPER_TIMEOUT")
        if timeout:
            if timeout.strip().lower() in ("0", "none"):
                config.timeout = None
            else:
                config.timeout = float(timeout)

        workers = os.environ.get("SCRAPER_WORKERS")
        if workers:
            config.max_workers = max(1, int(workers))
        return config


# =============================================================================
# FETCHER
# =============================================================================

class Fetcher:
    """Issues single GET requests against a store."""

    def __init__(self, config: Optional[FetchConfig] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        self.config = config or FetchConfig()
        self.client = self._create_client(transport)

    def _create_client(self, transport: Optional[httpx.BaseTransport]) -> httpx.Client:
        """Create an httpx client with HTTP/2 support."""
        return httpx.Client(
            http2=self.config.http2,
            headers={
                'User-Agent': self.config.user_agent
            },
            follow_redirects=True,
            timeout=self.config.timeout,
            transport=transport,
        )

    def get(self, url: str) -> httpx.Response:
        try:
            resp = self.client.get(url)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise NetworkError(f"{url} returned HTTP {status}", url=url, status_code=status) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(f"{url} unreachable: {e}", url=url) from e
        logger.debug(f"GET {url} -> {resp.status_code}")
        return resp

    def get_text(self, url: str) -> str:
        return self.get(url).text

    def get_json(self, url: str, field: Optional[str] = None) -> Any:
        """
        GET a JSON document. With `field`, return that top-level member and
        treat its absence as a malformed response.
        """
        resp = self.get(url)
        try:
            payload = resp.json()
        except ValueError as e:
            raise MalformedResponseError(f"{url} did not return JSON", url=url) from e

        if field is None:
            return payload
        if not isinstance(payload, dict) or payload.get(field) is None:
            raise MalformedResponseError(f"{url} has no '{field}' field", url=url)
        return payload[field]

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
