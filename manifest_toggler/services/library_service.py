# manifest_toggler/services/library_service.py
import os
from pathlib import Path

from manifest_toggler.core.constants import (
    DRIVE_PATH_PATTERN,
    LIBRARY_CONFIG_CANDIDATES,
    LIBRARY_PATH_PATTERN,
)
from manifest_toggler.utils.logger_utils import logger


def path_key(path: Path | str) -> str:
    """Case-insensitive comparison key for a filesystem path."""
    return os.path.normpath(str(path)).casefold()


class LibraryService:
    """
    Reads libraryfolders.vdf. The format has no grammar worth parsing here,
    so library paths are pulled out of the raw text with two patterns.
    """

    def resolve_library_config_path(self, root: Path) -> Path | None:
        """Returns the first existing libraryfolders.vdf under the root, or None."""
        for parts in LIBRARY_CONFIG_CANDIDATES:
            candidate = Path(root).joinpath(*parts)
            if candidate.is_file():
                return candidate
        return None

    @staticmethod
    def _unescape(raw: str) -> str:
        return raw.replace("\\\\", "\\")

    def parse_library_folders(self, config_path: Path) -> set[Path]:
        """
        Extracts every existing library directory from the file.
        OSError while reading is left to the caller.
        """
        text = Path(config_path).read_text(encoding="utf-8", errors="replace")

        found: dict[str, Path] = {}
        raw_paths = [m.group(1) for m in LIBRARY_PATH_PATTERN.finditer(text)]
        raw_paths += [m.group(1) for m in DRIVE_PATH_PATTERN.finditer(text)]

        for raw in raw_paths:
            candidate = Path(self._unescape(raw))
            key = path_key(candidate)
            if key in found:
                continue
            if not candidate.is_dir():
                logger.debug(f"Skipping library path that does not exist: {candidate}")
                continue
            found[key] = candidate

        logger.debug(f"Found {len(found)} library folder(s) in '{config_path}'")
        return set(found.values())
