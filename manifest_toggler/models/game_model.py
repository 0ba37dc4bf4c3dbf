# manifest_toggler/models/game_model.py
from __future__ import annotations
import os
import stat
from dataclasses import dataclass
from pathlib import Path


def is_manifest_read_only(path: Path | str) -> bool:
    """
    Reads the live read-only state of a manifest.
    A missing or inaccessible file counts as writable.
    """
    try:
        mode = os.stat(path).st_mode
    except OSError:
        return False
    if not stat.S_ISREG(mode):
        return False
    # os.access() is useless here when running as root
    return not mode & stat.S_IWUSR


@dataclass(frozen=True)
class GameEntry:
    """Represents one installed application found by a scan. Immutable."""

    name: str
    app_id: str
    manifest_path: Path
    library_name: str = ""

    @property
    def is_read_only(self) -> bool:
        """Never cached: the manifest may be changed by another process."""
        return is_manifest_read_only(self.manifest_path)
