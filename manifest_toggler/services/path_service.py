# manifest_toggler/services/path_service.py
import os
import sys
from pathlib import Path
from typing import Callable, Mapping

from manifest_toggler.core.constants import (
    STEAM_CONFIG_DIR_NAME,
    STEAM_REGISTRY_KEY,
    STEAM_REGISTRY_VALUES,
)
from manifest_toggler.services.library_service import LibraryService
from manifest_toggler.utils.logger_utils import logger


def read_steam_registry() -> list[str]:
    """
    Returns the install paths stored under HKCU\\Software\\Valve\\Steam,
    in lookup order. Only meaningful on Windows.
    """
    import winreg

    values = []
    with winreg.OpenKey(winreg.HKEY_CURRENT_USER, STEAM_REGISTRY_KEY) as key:
        for value_name in STEAM_REGISTRY_VALUES:
            try:
                value, _ = winreg.QueryValueEx(key, value_name)
            except FileNotFoundError:
                continue
            if isinstance(value, str):
                values.append(value)
    return values


class PathService:
    """Finds and validates the Steam installation root."""

    def __init__(
        self,
        library_service: LibraryService,
        platform: str | None = None,
        environ: Mapping[str, str] | None = None,
        home: Path | None = None,
        registry_reader: Callable[[], list[str]] | None = None,
    ):
        # --- Injected Services ---
        self.library_service = library_service

        # --- Platform Details (overridable for tests) ---
        self.platform = platform or sys.platform
        self.environ = environ if environ is not None else os.environ
        self.home = home or Path.home()
        if registry_reader is None and self.platform == "win32":
            registry_reader = read_steam_registry
        self.registry_reader = registry_reader

    def _registry_candidates(self) -> list[Path]:
        if self.registry_reader is None:
            return []
        try:
            values = self.registry_reader()
        except OSError as e:
            # No stored preference is a normal outcome
            logger.debug(f"Steam registry lookup failed: {e}")
            return []
        return [Path(v) for v in values if v and v.strip()]

    def default_candidates(self) -> list[Path]:
        """Well-known install locations for the current platform, in priority order."""
        if self.platform == "win32":
            candidates = []
            for env_name, parts in (
                ("ProgramFiles(x86)", ("Steam",)),
                ("ProgramFiles", ("Steam",)),
                ("LOCALAPPDATA", ("Programs", "Steam")),
            ):
                base = self.environ.get(env_name)
                if base:
                    candidates.append(Path(base, *parts))
            return candidates

        if self.platform == "darwin":
            return [self.home / "Library" / "Application Support" / "Steam"]

        return [
            self.home / ".local" / "share" / "Steam",
            self.home / ".steam" / "steam",
            self.home / ".var" / "app" / "com.valvesoftware.Steam" / ".local" / "share" / "Steam",
            self.home / "snap" / "steam" / "common" / ".local" / "share" / "Steam",
        ]

    def resolve_default_root(self) -> Path | None:
        """
        Registry first, then the platform defaults.
        Returns the first candidate that is an existing directory, or None.
        """
        for candidate in self._registry_candidates() + self.default_candidates():
            if candidate.is_dir():
                logger.info(f"Default Steam root found at: {candidate}")
                return candidate
            logger.debug(f"Steam root candidate does not exist: {candidate}")

        logger.info("No default Steam root found.")
        return None

    def is_valid_root(self, path: Path | str | None) -> bool:
        """A root needs a 'config' folder and a resolvable libraryfolders.vdf."""
        if not path or not str(path).strip():
            return False
        root = Path(path)
        if not (root / STEAM_CONFIG_DIR_NAME).is_dir():
            logger.debug(f"'{root}' has no '{STEAM_CONFIG_DIR_NAME}' folder.")
            return False
        if self.library_service.resolve_library_config_path(root) is None:
            logger.debug(f"'{root}' has no library configuration file.")
            return False
        return True
