"""Extraction of a single expected binary from a release archive."""

import logging
import shutil
import stat
import tarfile
import zipfile
from pathlib import Path
from typing import List

from ..errors import AcquireError, ArchiveShapeMismatch

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIXES = (".tgz", ".tar.gz", ".zip")


def is_archive_url(url: str) -> bool:
    return url.lower().endswith(ARCHIVE_SUFFIXES)


def _normalize(name: str) -> str:
    while name.startswith("./"):
        name = name[2:]
    return name.rstrip("/")


def _single(expected: str, names: List[str]) -> int:
    """Index of the only entry named expected."""
    matches = [i for i, name in enumerate(names) if _normalize(name) == expected]
    if not matches:
        raise ArchiveShapeMismatch(expected, [], "entry missing")
    if len(matches) > 1:
        raise ArchiveShapeMismatch(expected, [names[i] for i in matches], "multiple matching entries")
    return matches[0]


def _extract_tar(archive: Path, expected: str, dest: Path):
    with tarfile.open(archive, "r:*") as tar:
        members = tar.getmembers()
        member = members[_single(expected, [m.name for m in members])]
        if not member.isfile():
            kind = "directory" if member.isdir() else "link" if member.issym() or member.islnk() else "special file"
            raise ArchiveShapeMismatch(expected, [member.name], f"entry is a {kind}")
        src = tar.extractfile(member)
        with src, open(dest, "wb") as out:
            shutil.copyfileobj(src, out)


def _extract_zip(archive: Path, expected: str, dest: Path):
    with zipfile.ZipFile(archive) as zf:
        infos = zf.infolist()
        info = infos[_single(expected, [i.filename for i in infos])]
        if info.is_dir():
            raise ArchiveShapeMismatch(expected, [info.filename], "entry is a directory")
        if stat.S_ISLNK(info.external_attr >> 16):
            raise ArchiveShapeMismatch(expected, [info.filename], "entry is a link")
        with zf.open(info) as src, open(dest, "wb") as out:
            shutil.copyfileobj(src, out)


def extract_entry(archive: Path, expected: str, dest: Path) -> Path:
    """Write exactly one archive entry to dest.

    Raises ArchiveShapeMismatch when the entry is missing, ambiguous or not
    a regular file. dest is removed on any failure.
    """
    logger.debug("Extracting %s from %s", expected, archive)
    try:
        if zipfile.is_zipfile(archive):
            _extract_zip(archive, expected, dest)
        elif tarfile.is_tarfile(archive):
            _extract_tar(archive, expected, dest)
        else:
            raise ArchiveShapeMismatch(expected, [], "not a tar or zip archive")
    except (tarfile.TarError, zipfile.BadZipFile, EOFError) as e:
        dest.unlink(missing_ok=True)
        raise AcquireError(f"Could not read archive {archive}: {e}") from e
    except Exception:
        dest.unlink(missing_ok=True)
        raise
    return dest
