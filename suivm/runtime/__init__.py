"""Platform detection, archive extraction and source builds."""

from .archive import extract_entry
from .builder import Builder, CargoBuilder
from .targets import AssetSpec, detect_platform

__all__ = ["extract_entry", "Builder", "CargoBuilder", "AssetSpec", "detect_platform"]
