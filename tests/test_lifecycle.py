"""Tests for install / use / uninstall."""

from unittest.mock import AsyncMock

import pytest

from suivm.core.acquirer import Acquirer, Mode
from suivm.core.lifecycle import LifecycleController
from suivm.errors import ActiveVersionError, AcquireError, CorruptedInstallation, NoCurrentVersion
from suivm.versions.resolver import Resolver


@pytest.fixture
def make_controller(install_fake, make_index):
    """Controller over a real store with a stubbed acquirer."""
    def build(store, index=None, fail=False):
        index = index or make_index(commits={"main": "deadbeef"})
        acquirer = AsyncMock(spec=Acquirer)
        acquirer.select_mode.return_value = Mode.DOWNLOAD

        async def acquire(version, mode):
            if fail:
                raise AcquireError("download interrupted")
            install_fake(store, version, f"sui {version}".encode())
            return store.path_for(version)

        acquirer.acquire.side_effect = acquire
        return LifecycleController(store, index, Resolver(index), acquirer), acquirer

    return build


def snapshot(store):
    files = {p.name: p.read_bytes() for p in store.bin_dir().iterdir()}
    pointer = store.current_pointer_path()
    return files, pointer.read_bytes() if pointer.exists() else None


@pytest.mark.asyncio
async def test_install_acquires_and_keeps_pointer(store, make_controller):
    controller, acquirer = make_controller(store)
    outcome = await controller.install("0.2.0")
    assert outcome == ("0.2.0", True)
    assert store.list_installed() == {"0.2.0"}
    assert store.read_current() is None
    acquirer.acquire.assert_awaited_once_with("0.2.0", Mode.DOWNLOAD)


@pytest.mark.asyncio
async def test_install_twice_is_noop(store, make_controller):
    controller, acquirer = make_controller(store)
    await controller.install("0.2.0")
    before = store.path_for("0.2.0").stat().st_mtime_ns
    outcome = await controller.install("0.2.0")
    assert outcome.changed is False
    assert acquirer.acquire.await_count == 1
    assert acquirer.select_mode.await_count == 1
    assert store.path_for("0.2.0").stat().st_mtime_ns == before


@pytest.mark.asyncio
async def test_install_force_reacquires(store, make_controller):
    controller, acquirer = make_controller(store)
    await controller.install("0.2.0")
    await controller.install("0.2.0", force=True)
    assert acquirer.acquire.await_count == 2


@pytest.mark.asyncio
async def test_install_compile_passes_through(store, make_controller):
    controller, acquirer = make_controller(store)
    await controller.install("main", force_compile=True)
    acquirer.select_mode.assert_awaited_once_with("deadbeef", True)
    assert store.list_installed() == {"deadbeef"}


@pytest.mark.asyncio
async def test_use_installs_then_points(store, make_controller):
    controller, acquirer = make_controller(store)
    outcome = await controller.use("latest")
    assert outcome == ("0.3.0", True)
    assert "0.3.0" in store.list_installed()
    assert store.read_current() == "0.3.0"


@pytest.mark.asyncio
async def test_use_installed_version_skips_acquire(store, make_controller, install_fake):
    install_fake(store, "0.1.0")
    controller, acquirer = make_controller(store)
    await controller.use("0.1.0")
    acquirer.acquire.assert_not_awaited()
    assert store.read_current() == "0.1.0"
    assert (await controller.use("0.1.0")).changed is False


@pytest.mark.asyncio
async def test_failed_acquire_never_moves_pointer(store, make_controller, install_fake):
    install_fake(store, "0.1.0")
    store.write_current("0.1.0")
    controller, _ = make_controller(store, fail=True)
    with pytest.raises(AcquireError):
        await controller.use("0.3.0")
    assert store.read_current() == "0.1.0"
    assert store.list_installed() == {"0.1.0"}


@pytest.mark.asyncio
async def test_uninstall_active_version_refused(store, make_controller, install_fake):
    install_fake(store, "0.2.0")
    install_fake(store, "0.1.0")
    store.write_current("0.2.0")
    before = snapshot(store)
    controller, _ = make_controller(store)
    with pytest.raises(ActiveVersionError) as exc:
        await controller.uninstall("0.2.0")
    assert exc.value.version == "0.2.0"
    assert snapshot(store) == before


@pytest.mark.asyncio
async def test_uninstall_latest_alias_when_active(store, make_controller, install_fake):
    install_fake(store, "0.3.0")
    store.write_current("0.3.0")
    controller, _ = make_controller(store)
    with pytest.raises(ActiveVersionError):
        await controller.uninstall("latest")
    assert store.list_installed() == {"0.3.0"}


@pytest.mark.asyncio
async def test_uninstall_absent_version_is_idempotent(store, make_controller, install_fake):
    install_fake(store, "0.1.0")
    before = snapshot(store)
    controller, _ = make_controller(store)
    outcome = await controller.uninstall("0.2.0")
    assert outcome == ("0.2.0", False)
    assert snapshot(store) == before


@pytest.mark.asyncio
async def test_uninstall_removes_installed_version_without_network(store, make_controller, install_fake, make_index):
    install_fake(store, "0.1.0")
    install_fake(store, "0.2.0")
    store.write_current("0.2.0")
    index = make_index()
    controller, _ = make_controller(store, index)
    outcome = await controller.uninstall("0.1.0")
    assert outcome == ("0.1.0", True)
    assert store.list_installed() == {"0.2.0"}
    index.fetch_releases.assert_not_awaited()


def test_status_without_current_version(store, make_controller):
    controller, _ = make_controller(store)
    with pytest.raises(NoCurrentVersion) as exc:
        controller.status()
    assert "suivm use latest" in str(exc.value)


def test_status_with_missing_binary(store, make_controller):
    store.write_current("0.2.0")
    controller, _ = make_controller(store)
    with pytest.raises(CorruptedInstallation):
        controller.status()


def test_status_and_installed(store, make_controller, install_fake):
    install_fake(store, "0.2.0")
    install_fake(store, "0.1.0")
    store.write_current("0.2.0")
    controller, _ = make_controller(store)
    assert controller.status() == "0.2.0"
    assert controller.installed() == ["0.1.0", "0.2.0"]


@pytest.mark.asyncio
async def test_available_flags(store, make_controller, install_fake):
    install_fake(store, "0.1.0")
    install_fake(store, "0.3.0")
    store.write_current("0.1.0")
    controller, _ = make_controller(store)
    assert await controller.available() == [
        ("0.1.0", ["installed", "current"]),
        ("0.2.0", []),
        ("0.3.0", ["latest", "installed"]),
    ]
