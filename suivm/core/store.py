"""On-disk version store.

Layout::

    <root>/
      .version        current version, absent until the first `use`
      bin/<version>   installed binaries
      bin/.<name>     partial downloads and staging files
      .build/         scratch space for source builds
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Set

from ..errors import CorruptedInstallation, StoreIOError

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."


class Store:
    VERSION_FILE = ".version"

    def __init__(self, root: Path):
        self.root = Path(root)

    def root_dir(self) -> Path:
        return self._ensure(self.root)

    def bin_dir(self) -> Path:
        return self._ensure(self.root / "bin")

    def build_dir(self) -> Path:
        return self.root_dir() / ".build"

    def current_pointer_path(self) -> Path:
        return self.root / self.VERSION_FILE

    def _ensure(self, path: Path) -> Path:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreIOError(f"Could not create directory ({e.strerror})", path) from e
        return path

    def read_current(self) -> Optional[str]:
        """The current version, or None when no version is in use."""
        path = self.current_pointer_path()
        try:
            value = path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreIOError(f"Could not read version file ({e.strerror})", path) from e
        return value or None

    def write_current(self, version: str):
        """Atomically point the store at version."""
        if self.read_current() == version:
            return

        root = self.root_dir()
        fd, tmp = tempfile.mkstemp(dir=root, prefix=f"{self.VERSION_FILE}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(version)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.current_pointer_path())
        except OSError as e:
            Path(tmp).unlink(missing_ok=True)
            raise StoreIOError(f"Could not write version file ({e.strerror})", self.current_pointer_path()) from e
        logger.info("Current version set to %s", version)

    def list_installed(self) -> Set[str]:
        bin_dir = self.bin_dir()
        try:
            entries = list(bin_dir.iterdir())
        except OSError as e:
            raise StoreIOError(f"Could not list installed versions ({e.strerror})", bin_dir) from e
        return {
            entry.name for entry in entries
            if not entry.name.startswith(HIDDEN_PREFIX) and not entry.is_dir()
        }

    def path_for(self, version: str) -> Path:
        if not version or version.startswith(HIDDEN_PREFIX) or "/" in version or "\\" in version:
            raise StoreIOError(f"Invalid version name '{version}'", self.root / "bin")
        return self.bin_dir() / version

    def staging_path(self, version: str, suffix: str) -> Path:
        """Hidden sibling of path_for(version) that never counts as installed."""
        return self.path_for(version).with_name(f"{HIDDEN_PREFIX}{version}.{suffix}")

    def installed_path(self, version: str) -> Path:
        """Path of an installed version, failing if the binary is gone."""
        path = self.path_for(version)
        if not path.is_file():
            raise CorruptedInstallation(version, path)
        return path

    def remove(self, version: str) -> bool:
        """Delete an installed binary; False if it was already absent."""
        path = self.path_for(version)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StoreIOError(f"Could not remove ({e.strerror})", path) from e
        logger.info("Removed %s", path)
        return True
