# manifest_toggler/utils/system_utils.py
import os
import sys
import subprocess
from pathlib import Path
from manifest_toggler.utils.logger_utils import logger
from manifest_toggler.core.signals import global_signals


class SystemUtils:
    """A collection of static utility functions for OS-level interactions."""

    @staticmethod
    def open_path_in_explorer(path: Path) -> bool:
        """
        Opens a file or directory in the system file browser.
        Returns True if the browser was launched.
        """
        if not path or not Path(path).exists():
            error_msg = f"Path does not exist: {path}"
            logger.error(error_msg)
            global_signals.toast_requested.emit(error_msg, "error")
            return False

        logger.info(f"Opening path: {path}")
        try:
            if sys.platform == "win32":
                os.startfile(path)
            elif sys.platform == "darwin":
                subprocess.Popen(["open", str(path)])
            else:
                subprocess.Popen(["xdg-open", str(path)])
            return True
        except OSError as e:
            error_msg = f"Failed to open path '{path}' in file explorer."
            logger.critical(f"{error_msg} Reason: {e}", exc_info=True)
            global_signals.toast_requested.emit(error_msg, "error")
            return False

    @staticmethod
    def open_manifest_folder(manifest_path: Path) -> bool:
        """Opens the steamapps folder that holds a manifest."""
        return SystemUtils.open_path_in_explorer(Path(manifest_path).parent)
