# manifest_toggler/services/scanner_service.py
import os
from pathlib import Path

from manifest_toggler.core.constants import (
    MANIFEST_PREFIX,
    MANIFEST_SUFFIX,
    STEAMAPPS_DIR_NAME,
)
from manifest_toggler.models.game_model import GameEntry
from manifest_toggler.services.library_service import LibraryService, path_key
from manifest_toggler.services.manifest_service import ManifestService
from manifest_toggler.utils.logger_utils import logger


class ScanError(Exception):
    """Base class for errors that abort a whole scan."""

    def __init__(self, message: str, root: Path):
        super().__init__(message)
        self.root = root


class LibraryConfigNotFoundError(ScanError):
    pass


class LibraryConfigReadError(ScanError):
    pass


class ScannerService:
    """Builds the full, sorted list of installed games for a Steam root."""

    def __init__(
        self, library_service: LibraryService, manifest_service: ManifestService
    ):
        # --- Injected Services ---
        self.library_service = library_service
        self.manifest_service = manifest_service

    def _collect_libraries(self, root: Path) -> list[Path]:
        config_path = self.library_service.resolve_library_config_path(root)
        if config_path is None:
            raise LibraryConfigNotFoundError(
                f"libraryfolders.vdf not found under {root}", root
            )

        try:
            parsed = self.library_service.parse_library_folders(config_path)
        except OSError as e:
            raise LibraryConfigReadError(
                f"Could not read '{config_path}' under {root}: {e}", root
            ) from e

        # The root always hosts its own library
        libraries: dict[str, Path] = {path_key(root): root}
        for library in parsed:
            libraries.setdefault(path_key(library), library)

        return [libraries[key] for key in sorted(libraries)]

    @staticmethod
    def _manifest_dir_for(library: Path) -> Path:
        if library.name.casefold() == STEAMAPPS_DIR_NAME:
            return library
        return library / STEAMAPPS_DIR_NAME

    @staticmethod
    def _find_manifests(manifest_dir: Path) -> list[Path]:
        """Direct children named appmanifest_*.acf, any case, sorted."""
        manifests = []
        with os.scandir(manifest_dir) as it:
            for entry in it:
                lowered = entry.name.lower()
                if not (
                    lowered.startswith(MANIFEST_PREFIX)
                    and lowered.endswith(MANIFEST_SUFFIX)
                ):
                    continue
                if not entry.is_dir():
                    manifests.append(Path(entry.path))
        return sorted(manifests, key=path_key)

    def scan_all(self, root: Path | str) -> list[GameEntry]:
        """
        Scans every library reachable from the root.

        Raises
        ------
        LibraryConfigNotFoundError
            The root has no libraryfolders.vdf.
        LibraryConfigReadError
            libraryfolders.vdf exists but could not be read.
        """
        root = Path(root)
        logger.info(f"Scanning Steam root: {root}")

        games: dict[str, GameEntry] = {}
        for library in self._collect_libraries(root):
            manifest_dir = self._manifest_dir_for(library)
            if not manifest_dir.is_dir():
                logger.debug(f"No '{STEAMAPPS_DIR_NAME}' folder in library: {library}")
                continue

            try:
                manifests = self._find_manifests(manifest_dir)
            except OSError as e:
                logger.warning(f"Could not list '{manifest_dir}': {e}. Skipping library.")
                continue

            for manifest_path in manifests:
                entry = self.manifest_service.parse_manifest(
                    manifest_path, library_name=str(library)
                )
                if entry is None:
                    continue
                games.setdefault(path_key(manifest_path), entry)

        result = sorted(
            games.values(),
            key=lambda g: (g.name.upper(), path_key(g.manifest_path)),
        )
        logger.info(f"Scan finished: {len(result)} game(s) under {root}")
        return result
