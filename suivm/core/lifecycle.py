"""install / use / uninstall orchestration over the version store."""

import logging
from typing import List, NamedTuple, Tuple

from ..errors import ActiveVersionError, NoCurrentVersion
from ..versions.manager import RemoteIndex
from ..versions.resolver import Resolver
from .acquirer import Acquirer
from .store import Store

logger = logging.getLogger(__name__)


class Outcome(NamedTuple):
    version: str
    changed: bool


class LifecycleController:
    def __init__(self, store: Store, index: RemoteIndex, resolver: Resolver, acquirer: Acquirer):
        self.store = store
        self.index = index
        self.resolver = resolver
        self.acquirer = acquirer

    async def _acquire(self, version: str, force_compile: bool):
        mode = await self.acquirer.select_mode(version, force_compile)
        await self.acquirer.acquire(version, mode)

    async def install(self, identifier: str, force_compile: bool = False, force: bool = False) -> Outcome:
        """Make the resolved version available without touching the current pointer."""
        version = await self.resolver.resolve(identifier)
        if version in self.store.list_installed() and not (force or force_compile):
            logger.info("sui %s is already installed", version)
            return Outcome(version, False)
        await self._acquire(version, force_compile)
        return Outcome(version, True)

    async def use(self, identifier: str, force_compile: bool = False) -> Outcome:
        """Install if needed, then point the store at the resolved version."""
        version = await self.resolver.resolve(identifier)
        if version not in self.store.list_installed():
            await self._acquire(version, force_compile)
        changed = self.store.read_current() != version
        # Only after the binary sits at its final name
        self.store.write_current(version)
        return Outcome(version, changed)

    async def uninstall(self, identifier: str) -> Outcome:
        """Remove an installed version other than the current one."""
        if identifier in self.store.list_installed():
            version = identifier
        else:
            version = await self.resolver.resolve(identifier)
        if self.store.read_current() == version:
            raise ActiveVersionError(version)
        removed = self.store.remove(version)
        if not removed:
            logger.info("sui %s was not installed", version)
        return Outcome(version, removed)

    def status(self) -> str:
        """The current version, verified to have a binary in the store."""
        current = self.store.read_current()
        if current is None:
            raise NoCurrentVersion()
        self.store.installed_path(current)
        return current

    def installed(self) -> List[str]:
        return sorted(self.store.list_installed())

    async def available(self) -> List[Tuple[str, List[str]]]:
        """Releases oldest to newest, each with its latest/installed/current flags."""
        releases = await self.index.fetch_releases()
        installed = self.store.list_installed()
        current = self.store.read_current()
        listing = []
        for i, version in enumerate(releases):
            flags = []
            if i == len(releases) - 1:
                flags.append("latest")
            if version in installed:
                flags.append("installed")
            if version == current:
                flags.append("current")
            listing.append((version, flags))
        return listing
