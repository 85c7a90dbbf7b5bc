"""Platform detection and the published-asset lookup table."""

import platform
from typing import NamedTuple, Optional, Tuple

OS_MAP = {
    "windows": "windows",
    "linux": "linux",
    "darwin": "macos",
}
ARCH_MAP = {
    "amd64": "x86_64",
    "x86_64": "x86_64",
    "arm64": "arm64",
    "aarch64": "arm64",
}


class AssetSpec(NamedTuple):
    platform: str  # asset name suffix
    entry: str  # binary path inside the archive


# (os, arch) -> published asset
ASSETS = {
    ("linux", "x86_64"): AssetSpec("ubuntu-x86_64", "sui"),
    ("linux", "arm64"): AssetSpec("ubuntu-aarch64", "sui"),
    ("macos", "x86_64"): AssetSpec("macos-x86_64", "sui"),
    ("macos", "arm64"): AssetSpec("macos-arm64", "sui"),
    ("windows", "x86_64"): AssetSpec("windows-x86_64", "sui.exe"),
}


def detect_platform(system: Optional[str] = None, machine: Optional[str] = None) -> Tuple[str, str]:
    """Normalized (os, arch) for the running interpreter."""
    system = (system or platform.system()).lower()
    machine = (machine or platform.machine()).lower()
    return OS_MAP.get(system, system), ARCH_MAP.get(machine, machine)


def asset_for(os_name: str, arch: str) -> Optional[AssetSpec]:
    return ASSETS.get((os_name, arch))


def executable_name(os_name: str) -> str:
    return "sui.exe" if os_name == "windows" else "sui"
