"""Command line interface for suivm."""

import asyncio
import itertools
from contextlib import ExitStack
from pathlib import Path
from typing import Awaitable, Callable, TypeVar

import click

from . import __version__
from .config import Settings
from .core.acquirer import Acquirer
from .core.lifecycle import LifecycleController
from .core.store import Store
from .errors import NetworkError, ParseError, SuivmError
from .utils.logger import setup_logging
from .versions.manager import RemoteIndex
from .versions.resolver import LATEST, Resolver

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])

T = TypeVar("T")


class ProgressReporter:
    """Drives a click progress bar on stderr from download callbacks."""

    def __init__(self):
        self.name = None
        self.bar = None
        self._stack = ExitStack()

    async def __call__(self, name: str, downloaded: int, total: int):
        if self.bar is None or name != self.name or (total or None) != self.bar.length:
            self.close()
            self.name = name
            self.bar = self._stack.enter_context(self._new_bar(name, total))
        self.bar.update(downloaded - self.bar.pos)
        if total and downloaded >= total:
            self.close()

    def _new_bar(self, name: str, total: int):
        label = f"Downloading {name}"
        stderr = click.get_text_stream("stderr")
        if total:
            return click.progressbar(length=total, label=label, file=stderr)
        # Unsized iterable: no percentage, just the byte count
        return click.progressbar(itertools.repeat(None), label=label, show_pos=True, file=stderr)

    def close(self):
        self._stack.close()
        self.bar = None


def run(settings: Settings, operation: Callable[[LifecycleController], Awaitable[T]]) -> T:
    """Run operation against a fully wired controller in a fresh event loop."""
    progress = ProgressReporter()

    async def main() -> T:
        store = Store(settings.home)
        async with RemoteIndex(settings) as index:
            acquirer = Acquirer(settings, store, index, progress_callback=progress)
            controller = LifecycleController(store, index, Resolver(index), acquirer)
            return await operation(controller)

    try:
        return asyncio.run(main())
    except SuivmError as e:
        raise click.ClickException(str(e)) from e
    finally:
        progress.close()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--home", type=click.Path(file_okay=False, path_type=Path),
              help="Store directory (default: $SUIVM_HOME or ~/.suivm).")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
@click.version_option(__version__, prog_name="suivm")
@click.pass_context
def cli(ctx: click.Context, home: Path, verbose: bool):
    """Install and switch between versions of the sui CLI."""
    settings = Settings.from_env(home=home)
    setup_logging(settings.home, verbose)
    ctx.obj = settings


@cli.command("list")
@click.pass_obj
def list_cmd(settings: Settings):
    """List available releases, oldest first."""
    try:
        listing = run(settings, lambda c: c.available())
    except click.ClickException as e:
        if not isinstance(e.__cause__, (NetworkError, ParseError)):
            raise
        click.echo(f"Error: {e.message}", err=True)
        return
    for version, flags in listing:
        click.echo(f"{version}\t({', '.join(flags)})" if flags else version)


@cli.command()
@click.pass_obj
def latest(settings: Settings):
    """Print the newest release."""
    try:
        version = run(settings, lambda c: c.index.fetch_latest())
    except click.ClickException as e:
        if not isinstance(e.__cause__, (NetworkError, ParseError)):
            raise
        click.echo(f"Error: {e.message}", err=True)
        return
    click.echo(version)


@cli.command()
@click.pass_obj
def installed(settings: Settings):
    """List installed versions."""
    store = Store(settings.home)
    try:
        versions = sorted(store.list_installed())
        current = store.read_current()
    except SuivmError as e:
        raise click.ClickException(str(e)) from e
    if not versions:
        click.echo("No versions installed.")
    for version in versions:
        click.echo(f"* {version}" if version == current else f"  {version}")


@cli.command()
@click.pass_obj
def status(settings: Settings):
    """Show the version currently in use."""
    async def current(controller: LifecycleController) -> str:
        return controller.status()

    click.echo(f"Using sui {run(settings, current)}")


@cli.command()
@click.argument("identifier")
@click.option("--compile", "force_compile", is_flag=True, help="Build from source instead of downloading.")
@click.option("--force", is_flag=True, help="Reinstall even if already installed.")
@click.pass_obj
def install(settings: Settings, identifier: str, force_compile: bool, force: bool):
    """Install a release tag, "latest", branch or commit."""
    outcome = run(settings, lambda c: c.install(identifier, force_compile=force_compile, force=force))
    if outcome.changed:
        click.echo(f"Installed sui {outcome.version}")
    else:
        click.echo(f"sui {outcome.version} is already installed")


@cli.command()
@click.argument("identifier")
@click.pass_obj
def uninstall(settings: Settings, identifier: str):
    """Remove an installed version."""
    outcome = run(settings, lambda c: c.uninstall(identifier))
    if outcome.changed:
        click.echo(f"Uninstalled sui {outcome.version}")
    else:
        click.echo(f"sui {outcome.version} is not installed")


@cli.command()
@click.argument("identifier")
@click.option("--compile", "force_compile", is_flag=True, help="Build from source if not installed.")
@click.pass_obj
def use(settings: Settings, identifier: str, force_compile: bool):
    """Switch to a version, installing it first if needed."""
    outcome = run(settings, lambda c: c.use(identifier, force_compile=force_compile))
    click.echo(f"Now using sui {outcome.version}")


@cli.command()
@click.pass_obj
def update(settings: Settings):
    """Switch to the latest release."""
    outcome = run(settings, lambda c: c.use(LATEST))
    click.echo(f"Now using sui {outcome.version}")


def main():
    cli()


if __name__ == "__main__":
    main()
