"""Async HTTP client utilities."""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from ..errors import NetworkError, NotFoundError, ParseError

logger = logging.getLogger(__name__)


class AsyncHTTPClient:
    """Reusable async HTTP client mapping failures onto suivm errors."""

    def __init__(self, headers: Optional[Dict[str, str]] = None, timeout: float = 30.0):
        self.default_headers = headers or {}
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(headers=self.default_headers, timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self.session:
            await self.session.close()
            self.session = None

    def _session(self) -> aiohttp.ClientSession:
        if not self.session:
            self.session = aiohttp.ClientSession(headers=self.default_headers, timeout=self.timeout)
        return self.session

    async def get(self, url: str, headers: Optional[Dict[str, str]] = None) -> Any:
        """GET request returning decoded JSON."""
        logger.debug("GET %s", url)
        try:
            async with self._session().get(url, headers=headers) as resp:
                if resp.status in (404, 422):
                    raise NotFoundError(f"Nothing found at {url}")
                resp.raise_for_status()
                try:
                    return await resp.json(content_type=None)
                except ValueError as e:
                    raise ParseError(f"Malformed JSON from {url}: {e}") from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Request to {url} timed out") from e

    async def exists(self, url: str) -> bool:
        """HEAD request following redirects.

        True on a 2xx reply, False when the server says the resource is gone
        (404/410). Any other status is a NetworkError.
        """
        logger.debug("HEAD %s", url)
        try:
            async with self._session().head(url, allow_redirects=True) as resp:
                if resp.status in (404, 410):
                    return False
                resp.raise_for_status()
                return True
        except aiohttp.ClientError as e:
            raise NetworkError(f"Request to {url} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Request to {url} timed out") from e
