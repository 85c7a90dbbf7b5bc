"""Error types raised by suivm components."""

from pathlib import Path
from typing import List, Optional


class SuivmError(Exception):
    """Base error with an optional remediation hint."""

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.hint = hint

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\n{self.hint}"
        return self.message


class NetworkError(SuivmError):
    """Transport, DNS or timeout failure while talking to a remote index."""


class ParseError(SuivmError):
    """Remote response could not be decoded."""


class NotFoundError(SuivmError):
    """Remote index has no entry for the request."""


class ResolveError(SuivmError):
    def __init__(self, identifier: str):
        super().__init__(
            f"Could not resolve '{identifier}' to a release, branch or commit",
            hint="Run `suivm list` to see available releases.",
        )
        self.identifier = identifier


class AcquireError(SuivmError):
    """Artifact could not be produced."""


class ArchiveShapeMismatch(AcquireError):
    def __init__(self, expected: str, matches: List[str], reason: str):
        super().__init__(f"Unexpected archive contents for '{expected}': {reason}")
        self.expected = expected
        self.matches = matches


class ToolchainFailure(AcquireError):
    def __init__(self, exit_code: int, command: str):
        super().__init__(f"Build command '{command}' failed with exit code {exit_code}")
        self.exit_code = exit_code
        self.command = command


class UnsupportedPlatform(AcquireError):
    """No published binary exists for this OS/architecture pair."""


class StoreIOError(SuivmError):
    def __init__(self, message: str, path: Path):
        super().__init__(f"{message}: {path}")
        self.path = path


class ActiveVersionError(SuivmError):
    def __init__(self, version: str):
        super().__init__(
            f"sui {version} is currently in use",
            hint="Switch to another version with `suivm use <version>` first.",
        )
        self.version = version


class CorruptedInstallation(SuivmError):
    def __init__(self, version: str, path: Path):
        super().__init__(
            f"Sui installation corrupted: {path} is missing",
            hint=f"Run `suivm install {version}`",
        )
        self.version = version
        self.path = path


class NoCurrentVersion(SuivmError):
    def __init__(self):
        super().__init__("Sui is not installed.", hint="Run `suivm use latest`")
