# tests/test_game_list_vm.py
import json

import pytest
from PyQt6.QtCore import QCoreApplication, QThreadPool

from manifest_toggler.models.game_model import GameEntry
from manifest_toggler.services import (
    ConfigService,
    LibraryService,
    ManifestService,
    PathService,
    ScannerService,
)
from manifest_toggler.services.manifest_service import backup_path_for
from manifest_toggler.utils.system_utils import SystemUtils
from manifest_toggler.viewmodels import GameListViewModel
from tests.conftest import write_vdf


@pytest.fixture
def home(tmp_path):
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config.json"


@pytest.fixture
def vm(qapp, home, config_path):
    library_service = LibraryService()
    manifest_service = ManifestService()
    return GameListViewModel(
        config_service=ConfigService(config_path),
        path_service=PathService(
            library_service, platform="linux", environ={}, home=home, registry_reader=None
        ),
        scanner_service=ScannerService(library_service, manifest_service),
        manifest_service=manifest_service,
        system_utils=SystemUtils(),
    )


def record(signal):
    received = []
    signal.connect(lambda *args: received.append(args[0] if len(args) == 1 else args))
    return received


def remembered_root(config_path):
    return json.loads(config_path.read_text(encoding="utf-8"))["settings"]["steam_root"]


# --- Root selection ---


def test_initial_state_uses_remembered_root(vm, steam_root, config_path):
    config_path.write_text(
        json.dumps({"settings": {"steam_root": str(steam_root)}}), encoding="utf-8"
    )

    assert vm.load_initial_state()
    assert vm.steam_root == steam_root


def test_initial_state_falls_back_to_default_and_remembers_it(vm, home, config_path):
    default = home / ".steam" / "steam"
    (default / "config").mkdir(parents=True)
    write_vdf(default / "steamapps" / "libraryfolders.vdf", [default])

    assert vm.load_initial_state()
    assert vm.steam_root == default
    assert remembered_root(config_path) == str(default)


def test_initial_state_without_any_root(vm):
    statuses = record(vm.status_changed)

    assert not vm.load_initial_state()
    assert vm.steam_root is None
    assert statuses


def test_select_invalid_root_is_rejected(vm, tmp_path, config_path):
    messages = record(vm.invalid_root_selected)

    assert not vm.select_root(tmp_path)

    assert vm.steam_root is None
    assert len(messages) == 1 and "config" in messages[0]
    assert not config_path.exists()


def test_select_root_scans_and_remembers(vm, steam_root, config_path):
    updates = record(vm.games_updated)

    assert vm.select_root(steam_root)

    assert [g.name for g in vm.all_games] == ["Alpha", "Beta"]
    assert [g.name for g in updates[-1]] == ["Alpha", "Beta"]
    assert remembered_root(config_path) == str(steam_root)


def test_select_root_without_remembering(vm, steam_root, config_path):
    assert vm.select_root(steam_root, remember=False)
    assert not config_path.exists()


def test_select_root_reports_unsaved_root(vm, steam_root, tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    vm.config_service = ConfigService(blocker / "config.json")
    toasts = record(vm.toast_requested)

    assert not vm.select_root(steam_root)

    assert not vm.config_saved
    assert vm.steam_root == steam_root
    assert [g.name for g in vm.all_games] == ["Alpha", "Beta"]
    assert toasts and toasts[-1][1] == "warning"


def test_select_root_overwrites_corrupt_config(vm, steam_root, config_path):
    config_path.write_text("{not json", encoding="utf-8")

    assert vm.select_root(steam_root)

    assert vm.config_saved
    assert remembered_root(config_path) == str(steam_root)


def test_scan_error_is_reported(vm, steam_root):
    vm.select_root(steam_root)
    (steam_root / "steamapps" / "libraryfolders.vdf").unlink()
    failures = record(vm.scan_failed)

    assert not vm.refresh()
    assert len(failures) == 1 and str(steam_root) in failures[0]


def test_refresh_replaces_results(vm, steam_root):
    vm.select_root(steam_root)
    first = vm.all_games
    (steam_root / "steamapps" / "appmanifest_10.acf").unlink()

    vm.refresh()

    assert [g.name for g in vm.all_games] == ["Beta"]
    assert [g.name for g in first] == ["Alpha", "Beta"]


def test_refresh_async_delivers_results(vm, steam_root):
    vm.select_root(steam_root, remember=False)
    vm.all_games = []

    assert vm.refresh_async()
    assert not vm.refresh_async()  # one scan at a time

    QThreadPool.globalInstance().waitForDone()
    QCoreApplication.processEvents()

    assert [g.name for g in vm.all_games] == ["Alpha", "Beta"]
    assert not vm.is_scanning


# --- Filtering ---


def test_filter_by_name_and_app_id(vm, steam_root):
    vm.select_root(steam_root)

    vm.set_filter("alp")
    assert [g.name for g in vm.visible_games()] == ["Alpha"]

    vm.set_filter("20")
    assert [g.name for g in vm.visible_games()] == ["Beta"]

    vm.set_filter("")
    assert len(vm.visible_games()) == 2


def test_filter_by_library_and_lock_state(vm, steam_root, tmp_path):
    vm.select_root(steam_root)
    vm.lock(vm.find_games("Beta"))

    vm.set_filter(library=str(tmp_path / "L"))
    assert [g.name for g in vm.visible_games()] == ["Beta"]

    vm.set_filter(locked=True)
    assert [g.name for g in vm.visible_games()] == ["Beta"]

    vm.set_filter(locked=False)
    assert [g.name for g in vm.visible_games()] == ["Alpha"]


def test_library_names(vm, steam_root, tmp_path):
    vm.select_root(steam_root)

    assert set(vm.library_names()) == {str(steam_root), str(tmp_path / "L")}


def test_find_games_by_id_or_name(vm, steam_root):
    vm.select_root(steam_root)

    assert [g.name for g in vm.find_games("10")] == ["Alpha"]
    assert [g.name for g in vm.find_games(" bEtA ")] == ["Beta"]
    assert vm.find_games("Gamma") == []


# --- Lock actions ---


def test_lock_and_unlock(vm, steam_root):
    vm.select_root(steam_root)

    assert vm.lock(vm.all_games) == []
    assert all(g.is_read_only for g in vm.all_games)

    assert vm.unlock(vm.all_games) == []
    assert not any(g.is_read_only for g in vm.all_games)


def test_toggle_flips_each_entry(vm, steam_root):
    vm.select_root(steam_root)
    vm.lock(vm.find_games("Alpha"))

    vm.toggle(vm.all_games)

    states = {g.name: g.is_read_only for g in vm.all_games}
    assert states == {"Alpha": False, "Beta": True}


def test_batch_continues_after_a_failure(vm, steam_root, tmp_path):
    vm.select_root(steam_root)
    ghost = GameEntry(name="Ghost", app_id="1", manifest_path=tmp_path / "appmanifest_1.acf")
    finished = record(vm.bulk_operation_finished)
    toasts = record(vm.toast_requested)

    failures = vm.lock([ghost] + vm.all_games)

    assert [name for name, _ in failures] == ["Ghost"]
    assert finished[-1] == failures
    assert toasts and toasts[-1][1] == "error"
    assert all(g.is_read_only for g in vm.all_games)


def test_backup_setting_is_respected(vm, steam_root, config_path):
    config_path.write_text(
        json.dumps({"settings": {"steam_root": str(steam_root), "backup_on_toggle": False}}),
        encoding="utf-8",
    )
    vm.load_initial_state()
    vm.refresh()

    vm.lock(vm.all_games)

    assert not any(backup_path_for(g.manifest_path).exists() for g in vm.all_games)


def test_lock_creates_backups_by_default(vm, steam_root):
    vm.select_root(steam_root)

    vm.lock(vm.all_games)

    assert all(backup_path_for(g.manifest_path).exists() for g in vm.all_games)


def test_open_folder_opens_steamapps(vm, steam_root, monkeypatch):
    vm.select_root(steam_root)
    opened = []
    monkeypatch.setattr(
        SystemUtils,
        "open_path_in_explorer",
        staticmethod(lambda path: opened.append(path) or True),
    )

    assert vm.open_folder(vm.find_games("Alpha")[0])
    assert opened == [steam_root / "steamapps"]
