# manifest_toggler/services/manifest_service.py
import os
import shutil
import stat
from pathlib import Path

from manifest_toggler.core.constants import (
    MANIFEST_APPID_PATTERN,
    MANIFEST_BACKUP_EXTENSION,
    MANIFEST_NAME_PATTERN,
)
from manifest_toggler.models.game_model import GameEntry, is_manifest_read_only
from manifest_toggler.utils.logger_utils import logger

_WRITE_BITS = stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH


class ManifestNotFoundError(FileNotFoundError):
    pass


def backup_path_for(manifest_path: Path | str) -> Path:
    """<manifest>.acf -> <manifest>.acf.bak"""
    return Path(f"{manifest_path}{MANIFEST_BACKUP_EXTENSION}")


class ManifestService:
    """Reads appmanifest_*.acf files and flips their read-only attribute."""

    # --- Parsing ---
    def parse_manifest(
        self, manifest_path: Path, library_name: str = ""
    ) -> GameEntry | None:
        """
        Builds a GameEntry from one manifest. Missing fields are tolerated;
        only an unreadable file returns None.
        """
        manifest_path = Path(manifest_path)
        try:
            text = manifest_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning(f"Could not read manifest '{manifest_path}': {e}. Skipping.")
            return None

        appid_match = MANIFEST_APPID_PATTERN.search(text)
        name_match = MANIFEST_NAME_PATTERN.search(text)

        return GameEntry(
            name=name_match.group(1) if name_match else manifest_path.stem,
            app_id=appid_match.group(1) if appid_match else "",
            manifest_path=manifest_path,
            library_name=library_name,
        )

    # --- Mutation ---
    def set_read_only(
        self, manifest_path: Path | str, read_only: bool, backup_if_missing: bool = True
    ) -> None:
        """
        Locks (read_only=True) or unlocks a manifest.

        The first time a manifest is touched, its content is copied to
        '<manifest>.bak' before anything else happens. An existing backup is
        never overwritten. Copy and permission errors propagate.
        """
        if not manifest_path or not str(manifest_path).strip():
            raise ManifestNotFoundError("Manifest not found: empty path")
        manifest_path = Path(manifest_path)
        if not manifest_path.is_file():
            raise ManifestNotFoundError(f"Manifest not found: {manifest_path}")

        # 1. Backup must happen before the attribute changes
        backup_path = backup_path_for(manifest_path)
        if backup_if_missing and not backup_path.exists():
            shutil.copyfile(manifest_path, backup_path)
            logger.info(f"Created manifest backup: {backup_path}")

        # 2. Flip the attribute
        mode = os.stat(manifest_path).st_mode
        if read_only:
            new_mode = mode & ~_WRITE_BITS
        else:
            new_mode = mode | stat.S_IWUSR
        os.chmod(manifest_path, stat.S_IMODE(new_mode))

        state = "read-only" if read_only else "writable"
        logger.info(f"Set '{manifest_path.name}' to {state}")

    def toggle_read_only(
        self, manifest_path: Path | str, backup_if_missing: bool = True
    ) -> bool:
        """Inverts the live read-only state. Returns the new state."""
        new_state = not is_manifest_read_only(manifest_path)
        self.set_read_only(manifest_path, new_state, backup_if_missing=backup_if_missing)
        return new_state
