"""Shared fixtures."""

from unittest.mock import AsyncMock

import pytest

from suivm.config import Settings
from suivm.core.store import Store
from suivm.errors import NotFoundError
from suivm.versions.manager import RemoteIndex

RELEASES = ["0.1.0", "0.2.0", "0.3.0"]


@pytest.fixture
def settings(tmp_path):
    """Settings rooted in an isolated store directory."""
    return Settings(home=tmp_path / "suivm", chunk_size=64)


@pytest.fixture
def store(settings):
    return Store(settings.home)


@pytest.fixture
def install_fake():
    """Drop an executable stand-in for an installed version into a store."""
    def install(store: Store, version: str, content: bytes = b"#!/bin/sh\n") -> None:
        path = store.path_for(version)
        path.write_bytes(content)
        path.chmod(0o755)

    return install


@pytest.fixture
def make_index():
    """Build a RemoteIndex double serving fixed releases and commits."""
    def build(releases=RELEASES, commits=None):
        commits = commits or {}
        index = AsyncMock(spec=RemoteIndex)
        index.fetch_releases.return_value = list(releases)

        async def latest():
            if not releases:
                raise NotFoundError("Release index is empty, no latest version")
            return releases[-1]

        async def commit(ref):
            if ref not in commits:
                raise NotFoundError(f"Nothing found for {ref}")
            return commits[ref]

        index.fetch_latest.side_effect = latest
        index.fetch_commit.side_effect = commit
        return index

    return build
