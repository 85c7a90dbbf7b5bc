"""Version index, resolution and downloads."""

from .download_manager import DownloadManager
from .manager import RemoteIndex
from .models import Commit, Release
from .resolver import Resolver

__all__ = ["DownloadManager", "RemoteIndex", "Resolver", "Release", "Commit"]
