"""Remote release and commit index."""

import logging
from urllib.parse import quote
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from ..config import Settings
from ..errors import NotFoundError, ParseError
from ..utils.async_http import AsyncHTTPClient
from .models import Commit, Release

logger = logging.getLogger(__name__)

_releases = TypeAdapter(List[Release])


class RemoteIndex:
    """Read-only view of upstream releases and commits."""

    def __init__(self, settings: Settings, client: Optional[AsyncHTTPClient] = None):
        self.settings = settings
        self.client = client or AsyncHTTPClient(settings.request_headers(), timeout=60.0)

    async def __aenter__(self):
        await self.client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.client.__aexit__(exc_type, exc, tb)

    async def fetch_releases(self) -> List[str]:
        """Release tags ordered oldest to newest."""
        data = await self.client.get(self.settings.releases_url)
        try:
            releases = _releases.validate_python(data)
        except ValidationError as e:
            raise ParseError(f"Malformed release index: {e}") from e
        # Upstream lists newest first
        tags = [r.tag_name for r in reversed(releases) if not r.draft]
        logger.debug("Fetched %d releases", len(tags))
        return tags

    async def fetch_latest(self) -> str:
        """Newest release tag."""
        tags = await self.fetch_releases()
        if not tags:
            raise NotFoundError("Release index is empty, no latest version")
        return tags[-1]

    async def fetch_commit(self, ref: str) -> str:
        """Resolve a branch name or partial commit to a full SHA."""
        data = await self.client.get(self.settings.commit_url.format(ref=quote(ref, safe="")))
        try:
            commit = Commit.model_validate(data)
        except ValidationError as e:
            raise ParseError(f"Malformed commit record for '{ref}': {e}") from e
        logger.debug("Resolved ref %s to %s", ref, commit.sha)
        return commit.sha

    async def asset_available(self, url: str) -> bool:
        """Whether a published binary asset exists at the URL."""
        return await self.client.exists(url)
