"""Resolution of user-supplied identifiers to installable versions."""

import logging

from ..errors import NotFoundError, ResolveError
from .manager import RemoteIndex

logger = logging.getLogger(__name__)

LATEST = "latest"


class Resolver:
    """Maps a tag, "latest", branch name or commit onto a version identifier.

    Tagged releases win over refs: a release tag is returned verbatim
    without consulting the commit endpoint. Anything else is looked up as
    a ref, and an identifier that matches neither is reported rather than
    guessed.
    """

    def __init__(self, index: RemoteIndex):
        self.index = index

    async def resolve(self, identifier: str) -> str:
        if identifier == LATEST:
            return await self.index.fetch_latest()

        releases = await self.index.fetch_releases()
        if identifier in releases:
            return identifier

        try:
            sha = await self.index.fetch_commit(identifier)
        except NotFoundError as e:
            raise ResolveError(identifier) from e
        logger.info("Resolved %s to commit %s", identifier, sha)
        return sha
