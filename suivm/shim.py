"""The `sui` shim: runs the binary of the current version."""

import os
import subprocess
import sys
from typing import List, Optional

import click

from .config import Settings
from .core.store import Store
from .errors import NoCurrentVersion, SuivmError


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    store = Store(Settings.from_env().home)
    try:
        version = store.read_current()
        if version is None:
            raise NoCurrentVersion()
        binary = store.installed_path(version)
    except SuivmError as e:
        click.echo(str(e), err=True)
        return 1

    if os.name == "nt":
        return subprocess.call([str(binary), *argv])
    os.execv(binary, [str(binary), *argv])


if __name__ == "__main__":
    sys.exit(main())
