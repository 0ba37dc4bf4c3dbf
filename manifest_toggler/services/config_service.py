# manifest_toggler/services/config_service.py
import json
from pathlib import Path
from typing import Any

from manifest_toggler.models.config_model import AppConfig
from manifest_toggler.utils.logger_utils import logger


class ConfigSaveError(IOError):
    pass


class ConfigService:
    """Manages all read/write operations for the config.json file."""

    def __init__(self, config_path: Path):
        # --- Service Setup ---
        self.config_path = Path(config_path)

    def load_config(self) -> AppConfig:
        """
        Loads the configuration from config.json.
        A missing or unreadable file gives a default AppConfig.
        """
        if not self.config_path.exists():
            logger.warning(
                f"Config file not found at '{self.config_path}'. Returning default config."
            )
            return AppConfig()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)

            settings = data.get("settings", {}) if isinstance(data, dict) else {}
            if not isinstance(settings, dict):
                logger.warning("'settings' in config.json is not an object. Ignoring.")
                settings = {}

            steam_root = settings.get("steam_root")
            if steam_root is not None and not isinstance(steam_root, str):
                logger.warning(f"Ignoring non-string steam_root: {steam_root!r}")
                steam_root = None

            logger.info("Successfully loaded configuration from config.json.")
            return AppConfig(
                steam_root=steam_root,
                backup_on_toggle=bool(settings.get("backup_on_toggle", True)),
            )

        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse config.json: {e}. Returning default config.")
            return AppConfig()
        except OSError as e:
            logger.error(f"Failed to read config.json: {e}. Returning default config.")
            return AppConfig()

    def save_config(self, config: AppConfig):
        """Writes the whole AppConfig to config.json."""
        logger.info(f"Saving configuration to {self.config_path}...")

        config_data = {
            "settings": {
                "steam_root": config.steam_root,
                "backup_on_toggle": config.backup_on_toggle,
            }
        }
        self._write(config_data)
        logger.info("Configuration saved successfully to config.json.")

    def save_setting(self, key: str, value: Any, section: str = "settings"):
        """
        Saves a single key-value pair, keeping everything else in the file.
        """
        section = section.lower()

        config_data = self._read_for_update()
        if not isinstance(config_data.get(section), dict):
            config_data[section] = {}

        config_data[section][key] = value
        self._write(config_data)
        logger.info(f"Saved setting: [{section}] {key} = {value}")

    def _read_for_update(self) -> dict:
        """
        Current file content as a dict. A corrupt or malformed file is
        replaced rather than blocking the save.
        """
        if not self.config_path.exists():
            return {"settings": {}}
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"config.json is corrupt ({e}). It will be recreated.")
            return {"settings": {}}
        except OSError as e:
            logger.error(f"Failed to read config before saving: {e}")
            raise ConfigSaveError(f"Failed to read config file: {e}") from e

        if not isinstance(data, dict):
            logger.warning("config.json is not an object. It will be recreated.")
            return {"settings": {}}
        return data

    def _write(self, config_data: dict):
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(config_data, f, indent=4)
        except OSError as e:
            logger.error(f"IOError while saving config: {e}", exc_info=True)
            raise ConfigSaveError(f"Failed to write to config file: {e}") from e
        except TypeError as e:
            logger.error(f"TypeError during JSON serialization: {e}", exc_info=True)
            raise ConfigSaveError(f"A data type could not be saved to JSON: {e}") from e
