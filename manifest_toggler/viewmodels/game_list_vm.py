# manifest_toggler/viewmodels/game_list_vm.py

import dataclasses
from pathlib import Path
from typing import Callable, Iterable, Optional
from PyQt6.QtCore import QObject, pyqtSignal, QThreadPool

from manifest_toggler.models.config_model import AppConfig
from manifest_toggler.models.game_model import GameEntry
from manifest_toggler.services.config_service import ConfigService, ConfigSaveError
from manifest_toggler.services.manifest_service import ManifestService
from manifest_toggler.services.path_service import PathService
from manifest_toggler.services.scanner_service import ScannerService, ScanError
from manifest_toggler.utils.async_utils import Worker
from manifest_toggler.utils.logger_utils import logger
from manifest_toggler.utils.system_utils import SystemUtils

INVALID_ROOT_MESSAGE = (
    "The selected directory does not look like a Steam root. It must contain a "
    "'config' folder and a 'libraryfolders.vdf' in steamapps/ or config/."
)


class GameListViewModel(QObject):
    """
    Holds the session state for one Steam root: the last scan result,
    the active filter, and batch lock/unlock actions.
    """

    # ---Signals for UI Feedback ---
    root_changed = pyqtSignal(str)
    games_updated = pyqtSignal(list)  # visible list[GameEntry]
    status_changed = pyqtSignal(str)
    scan_failed = pyqtSignal(str)
    invalid_root_selected = pyqtSignal(str)  # message
    toast_requested = pyqtSignal(str, str)  # message, level
    bulk_operation_finished = pyqtSignal(object)  # list of (name, error) tuples

    def __init__(
        self,
        config_service: ConfigService,
        path_service: PathService,
        scanner_service: ScannerService,
        manifest_service: ManifestService,
        system_utils: SystemUtils,
    ):
        super().__init__()
        # ---Injected Services ---
        self.config_service = config_service
        self.path_service = path_service
        self.scanner_service = scanner_service
        self.manifest_service = manifest_service
        self.system_utils = system_utils

        # ---Internal State ---
        self.config: AppConfig = AppConfig()
        self.steam_root: Optional[Path] = None
        self.all_games: list[GameEntry] = []
        self.is_scanning = False
        self.config_saved = True
        self._scan_worker: Optional[Worker] = None

        # ---Filter State ---
        self.search_text = ""
        self.library_filter = ""
        self.locked_filter: Optional[bool] = None

    # ---Initialization ---
    def load_config(self) -> AppConfig:
        self.config = self.config_service.load_config()
        return self.config

    def load_initial_state(self) -> bool:
        """
        Picks the session root: the remembered one if still valid, otherwise
        the platform default. Returns False when the user must choose one.
        """
        self.load_config()

        if self.path_service.is_valid_root(self.config.steam_root):
            self._set_root(Path(self.config.steam_root))
            return True

        if self.config.steam_root:
            logger.warning(f"Remembered Steam root is no longer valid: {self.config.steam_root}")

        default_root = self.path_service.resolve_default_root()
        if default_root and self.path_service.is_valid_root(default_root):
            self._set_root(default_root)
            self._remember_root(default_root)
            return True

        self.status_changed.emit("No root selected. Use 'Select Root'.")
        return False

    def select_root(self, path: Path | str, remember: bool = True) -> bool:
        """
        Validates a user-picked root, optionally remembers it, and rescans.
        Returns False if the root is invalid, the scan fails, or it could
        not be remembered (check config_saved).
        """
        if not self.path_service.is_valid_root(path):
            logger.warning(f"Rejected Steam root: {path}")
            self.invalid_root_selected.emit(INVALID_ROOT_MESSAGE)
            return False

        self._set_root(Path(path))
        saved = self._remember_root(self.steam_root) if remember else True
        scanned = self.refresh()
        return saved and scanned

    def _set_root(self, root: Path):
        self.steam_root = root
        self.all_games = []
        logger.info(f"Active Steam root: {root}")
        self.root_changed.emit(str(root))

    def _remember_root(self, root: Path) -> bool:
        self.config = dataclasses.replace(self.config, steam_root=str(root))
        try:
            self.config_service.save_setting("steam_root", str(root))
        except ConfigSaveError as e:
            logger.error(f"Could not remember Steam root: {e}")
            self.toast_requested.emit(f"Could not save settings: {e}", "warning")
            self.config_saved = False
            return False
        self.config_saved = True
        return True

    # ---Scanning ---
    def refresh(self) -> bool:
        """Synchronous rescan of the active root."""
        if self.steam_root is None:
            return False

        self.status_changed.emit("Scanning...")
        try:
            games = self.scanner_service.scan_all(self.steam_root)
        except ScanError as e:
            self._on_scan_error((type(e), e, ""))
            return False

        self._on_scan_result(games)
        return True

    def refresh_async(self) -> bool:
        """Rescans on the global thread pool. Only one scan runs at a time."""
        if self.steam_root is None or self.is_scanning:
            return False

        self.is_scanning = True
        self.status_changed.emit("Scanning...")

        worker = Worker(self.scanner_service.scan_all, self.steam_root)
        worker.signals.result.connect(self._on_scan_result)
        worker.signals.error.connect(self._on_scan_error)
        worker.signals.finished.connect(self._on_scan_finished)

        thread_pool = QThreadPool.globalInstance()
        if thread_pool is None:
            logger.critical("Could not get QThreadPool instance to run the scan.")
            self.is_scanning = False
            return False
        # Keeps the signals object alive until queued results are delivered
        self._scan_worker = worker
        thread_pool.start(worker)
        return True

    def _on_scan_result(self, games: list):
        # Replaced wholesale, never merged
        self.all_games = list(games)
        self.status_changed.emit(
            f"[{self.steam_root}] Found {len(self.all_games)} game(s)."
        )
        self.games_updated.emit(self.visible_games())

    def _on_scan_error(self, error_info: tuple):
        _exctype, value, _tb = error_info
        logger.error(f"Scan failed: {value}")
        self.status_changed.emit(f"Error: {value}")
        self.scan_failed.emit(str(value))

    def _on_scan_finished(self):
        self.is_scanning = False

    # ---Filtering ---
    def set_filter(
        self,
        search_text: str = "",
        library: str = "",
        locked: Optional[bool] = None,
    ):
        self.search_text = (search_text or "").strip().casefold()
        self.library_filter = (library or "").strip().casefold()
        self.locked_filter = locked
        self.games_updated.emit(self.visible_games())

    def _matches(self, game: GameEntry) -> bool:
        if self.search_text and not (
            self.search_text in game.name.casefold()
            or self.search_text in game.app_id.casefold()
        ):
            return False
        if self.library_filter and self.library_filter not in game.library_name.casefold():
            return False
        if self.locked_filter is not None and game.is_read_only != self.locked_filter:
            return False
        return True

    def visible_games(self) -> list[GameEntry]:
        return [g for g in self.all_games if self._matches(g)]

    def library_names(self) -> list[str]:
        """Distinct library names, for grouping in the view."""
        return sorted({g.library_name for g in self.all_games}, key=str.casefold)

    def find_games(self, target: str) -> list[GameEntry]:
        """Matches an app id exactly, or a name case-insensitively."""
        target = target.strip()
        by_id = [g for g in self.all_games if g.app_id and g.app_id == target]
        if by_id:
            return by_id
        folded = target.casefold()
        return [g for g in self.all_games if g.name.casefold() == folded]

    # ---Lock Actions ---
    def lock(self, games: Iterable[GameEntry]) -> list[tuple[str, str]]:
        return self._run_batch(
            games,
            lambda g: self.manifest_service.set_read_only(
                g.manifest_path, True, backup_if_missing=self.config.backup_on_toggle
            ),
        )

    def unlock(self, games: Iterable[GameEntry]) -> list[tuple[str, str]]:
        return self._run_batch(
            games,
            lambda g: self.manifest_service.set_read_only(
                g.manifest_path, False, backup_if_missing=self.config.backup_on_toggle
            ),
        )

    def toggle(self, games: Iterable[GameEntry]) -> list[tuple[str, str]]:
        return self._run_batch(
            games,
            lambda g: self.manifest_service.toggle_read_only(
                g.manifest_path, backup_if_missing=self.config.backup_on_toggle
            ),
        )

    def _run_batch(
        self, games: Iterable[GameEntry], action: Callable[[GameEntry], object]
    ) -> list[tuple[str, str]]:
        """
        Applies an action to every game. A failure is recorded and the batch
        moves on to the next entry.
        """
        failures: list[tuple[str, str]] = []
        for game in games:
            try:
                action(game)
            except OSError as e:
                logger.error(f"Failed for '{game.name}': {e}")
                failures.append((game.name, str(e)))

        self.bulk_operation_finished.emit(failures)
        if failures:
            self.toast_requested.emit(
                f"{len(failures)} manifest(s) could not be changed.", "error"
            )
        self.refresh()
        return failures

    def open_folder(self, game: GameEntry) -> bool:
        return self.system_utils.open_manifest_folder(game.manifest_path)
