"""Resumable streamed downloads of release assets."""

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional

import aiofiles
import aiohttp

from ..config import Settings
from ..errors import NetworkError, NotFoundError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], Awaitable[None]]


def _range_start(content_range: Optional[str]) -> Optional[int]:
    """First byte offset of a `Content-Range: bytes a-b/n` header."""
    if not content_range or not content_range.startswith("bytes "):
        return None
    span = content_range[len("bytes "):].split("/", 1)[0]
    start, _, _ = span.partition("-")
    try:
        return int(start)
    except ValueError:
        return None


def validator_path(dest: Path) -> Path:
    """Where the ETag/Last-Modified of a partial download is kept."""
    return dest.with_name(dest.name + ".validator")


class DownloadManager:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.chunk_size = settings.chunk_size
        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        self.session = aiohttp.ClientSession(
            headers=self.settings.request_headers(),
            timeout=aiohttp.ClientTimeout(total=None, sock_read=self.settings.timeout),
        )
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self.session:
            await self.session.close()
            self.session = None

    def _resume_headers(self, dest: Path) -> dict:
        """Range/If-Range headers for a partial file, empty if it can't be resumed."""
        offset = dest.stat().st_size if dest.exists() else 0
        validator = validator_path(dest)
        if not offset or not validator.exists():
            return {}
        return {"Range": f"bytes={offset}-", "If-Range": validator.read_text(encoding="utf-8").strip()}

    async def download_file(self, url: str, dest: Path, name: Optional[str] = None,
                            progress_callback: Optional[ProgressCallback] = None) -> Path:
        """Download url into dest, resuming a partial file with a validated range request.

        A partial file is only extended when the server answers 206 with a
        Content-Range starting at the partial size, and the request carried
        the validator recorded when the partial file was started. Any other
        answer rewrites the file from the first byte.
        """
        if not self.session:
            raise RuntimeError("DownloadManager must be used as an async context manager")

        name = name or dest.name
        dest.parent.mkdir(parents=True, exist_ok=True)
        headers = self._resume_headers(dest)
        offset = dest.stat().st_size if headers else 0

        try:
            async with self.session.get(url, headers=headers) as resp:
                rejected = resp.status == 416 and offset > 0
                if not rejected:
                    downloaded, total = await self._write_body(resp, dest, name, offset, progress_callback)
        except aiohttp.ClientError as e:
            raise NetworkError(f"Download of {url} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Download of {url} timed out") from e

        if rejected:
            logger.warning("Partial file %s rejected by server, restarting", dest)
            dest.unlink()
            validator_path(dest).unlink(missing_ok=True)
            return await self.download_file(url, dest, name, progress_callback)
        if total and downloaded != total:
            raise NetworkError(f"Download of {url} truncated at {downloaded} of {total} bytes")
        validator_path(dest).unlink(missing_ok=True)
        logger.debug("Downloaded %s (%d bytes) to %s", url, downloaded, dest)
        return dest

    async def _write_body(self, resp: aiohttp.ClientResponse, dest: Path, name: str, offset: int,
                          progress_callback: Optional[ProgressCallback]):
        if resp.status == 404:
            raise NotFoundError(f"No asset at {resp.url}")
        resp.raise_for_status()

        validator = validator_path(dest)
        if offset and resp.status == 206 and _range_start(resp.headers.get("Content-Range")) == offset:
            logger.info("Resuming %s at byte %d", name, offset)
            mode, downloaded = "ab", offset
        else:
            if offset:
                logger.info("Asset changed or range ignored for %s, restarting", name)
            mode, downloaded = "wb", 0
            # Ties any later resume to this exact copy of the asset
            tag = resp.headers.get("ETag") or resp.headers.get("Last-Modified")
            if tag:
                validator.write_text(tag, encoding="utf-8")
            else:
                validator.unlink(missing_ok=True)

        length = resp.headers.get("Content-Length")
        total = downloaded + int(length) if length is not None else 0

        async with aiofiles.open(dest, mode) as f:
            async for chunk in resp.content.iter_chunked(self.chunk_size):
                await f.write(chunk)
                downloaded += len(chunk)
                if progress_callback:
                    await progress_callback(name, downloaded, total)
        return downloaded, total
