"""Production of installed binaries by download or source build."""

import logging
import os
import shutil
import stat
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple

from ..config import Settings
from ..errors import StoreIOError, UnsupportedPlatform
from ..runtime.archive import extract_entry, is_archive_url
from ..runtime.builder import Builder, CargoBuilder
from ..runtime.targets import AssetSpec, asset_for, detect_platform
from ..versions.download_manager import DownloadManager, ProgressCallback
from ..versions.manager import RemoteIndex
from .store import Store

logger = logging.getLogger(__name__)


class Mode(Enum):
    DOWNLOAD = "download"
    COMPILE = "compile"


def make_executable(path: Path):
    if os.name == "nt":
        return
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR)


class Acquirer:
    """Places a binary for a resolved version at Store.path_for(version).

    Work happens under hidden staging names; the final name only appears
    through a single rename once the binary is complete and executable.
    """

    def __init__(self, settings: Settings, store: Store, index: RemoteIndex,
                 builder: Optional[Builder] = None, platform: Optional[Tuple[str, str]] = None,
                 progress_callback: Optional[ProgressCallback] = None):
        self.settings = settings
        self.store = store
        self.index = index
        self.platform = platform or detect_platform()
        self.builder = builder or CargoBuilder(settings.repo_url, os_name=self.platform[0])
        self.progress_callback = progress_callback

    @property
    def asset(self) -> Optional[AssetSpec]:
        return asset_for(*self.platform)

    def asset_url(self, version: str) -> Optional[str]:
        if self.asset is None:
            return None
        return self.settings.asset_url.format(version=version, platform=self.asset.platform)

    async def select_mode(self, version: str, force_compile: bool = False) -> Mode:
        """Download when a published binary exists, otherwise compile."""
        if force_compile:
            return Mode.COMPILE
        url = self.asset_url(version)
        if url is None:
            logger.info("No published binaries for %s/%s", *self.platform)
            return Mode.COMPILE
        if await self.index.asset_available(url):
            return Mode.DOWNLOAD
        logger.info("No published binary for %s at %s", version, url)
        return Mode.COMPILE

    async def acquire(self, version: str, mode: Mode) -> Path:
        logger.info("Acquiring sui %s by %s", version, mode.value)
        if mode is Mode.DOWNLOAD:
            return await self._download(version)
        return await self._compile(version)

    async def _download(self, version: str) -> Path:
        url = self.asset_url(version)
        if url is None:
            raise UnsupportedPlatform("No published sui binary for {}/{}".format(*self.platform))

        partial = self.store.staging_path(version, "part")
        async with DownloadManager(self.settings) as downloads:
            await downloads.download_file(url, partial, name=f"sui {version}",
                                          progress_callback=self.progress_callback)

        if not is_archive_url(url):
            return self._place(partial, version)

        staged = self.store.staging_path(version, "bin")
        try:
            extract_entry(partial, self.asset.entry, staged)
        finally:
            # A finished archive is never resumed
            partial.unlink(missing_ok=True)
        return self._place(staged, version)

    async def _compile(self, version: str) -> Path:
        build_root = self.store.build_dir() / version
        try:
            binary = await self.builder.build(version, build_root)
            return self._place(binary, version)
        finally:
            shutil.rmtree(build_root, ignore_errors=True)

    def _place(self, staged: Path, version: str) -> Path:
        final = self.store.path_for(version)
        try:
            make_executable(staged)
            os.replace(staged, final)
        except OSError as e:
            staged.unlink(missing_ok=True)
            raise StoreIOError(f"Could not install binary ({e.strerror})", final) from e
        logger.info("Installed sui %s at %s", version, final)
        return final
