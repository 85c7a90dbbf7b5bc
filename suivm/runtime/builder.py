"""Source builds of the sui binary."""

import asyncio
import logging
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from ..errors import AcquireError, ToolchainFailure
from .targets import detect_platform, executable_name

logger = logging.getLogger(__name__)


class Builder(ABC):
    @abstractmethod
    async def build(self, ref: str, dest_dir: Path) -> Path:
        """Build ref into dest_dir and return the produced binary."""


class CargoBuilder(Builder):
    """Compiles sui with `cargo install` pinned to a git revision."""

    def __init__(self, repo_url: str, os_name: Optional[str] = None, package: str = "sui", cargo: str = "cargo"):
        self.repo_url = repo_url
        self.os_name = os_name or detect_platform()[0]
        self.package = package
        self.cargo = cargo

    def command(self, ref: str, dest_dir: Path) -> List[str]:
        return [
            self.cargo, "install", "--locked",
            "--git", self.repo_url,
            "--rev", ref,
            "--root", str(dest_dir),
            self.package,
        ]

    async def build(self, ref: str, dest_dir: Path) -> Path:
        cmd = self.command(ref, dest_dir)
        printable = " ".join(cmd)
        if shutil.which(self.cargo) is None:
            raise ToolchainFailure(127, printable)

        dest_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Running %s", printable)
        # Output goes straight to the terminal
        proc = await asyncio.create_subprocess_exec(*cmd)
        code = await proc.wait()
        if code != 0:
            raise ToolchainFailure(code, printable)

        binary = dest_dir / "bin" / executable_name(self.os_name)
        if not binary.is_file():
            raise AcquireError(f"Build finished but {binary} was not produced")
        return binary
