# manifest_toggler/core/constants.py
import re

# --- Application Info ---
APP_NAME: str = "Steam Update Disabler"
ORG_NAME: str = "SteamManifestToggler"
APP_VERSION: str = "0.1.0"

# --- File & Directory Names ---
CONFIG_FILE_NAME: str = "config.json"
LOG_DIR_NAME: str = "logs"

# --- Steam Layout ---
STEAMAPPS_DIR_NAME: str = "steamapps"
STEAM_CONFIG_DIR_NAME: str = "config"
LIBRARY_CONFIG_FILE_NAME: str = "libraryfolders.vdf"
# Checked in this order, relative to the root
LIBRARY_CONFIG_CANDIDATES: tuple[tuple[str, ...], ...] = (
    (STEAMAPPS_DIR_NAME, LIBRARY_CONFIG_FILE_NAME),
    (STEAM_CONFIG_DIR_NAME, LIBRARY_CONFIG_FILE_NAME),
    (LIBRARY_CONFIG_FILE_NAME,),
)
MANIFEST_PREFIX: str = "appmanifest_"
MANIFEST_SUFFIX: str = ".acf"
MANIFEST_BACKUP_EXTENSION: str = ".bak"

# --- Registry (Windows) ---
STEAM_REGISTRY_KEY: str = r"Software\Valve\Steam"
STEAM_REGISTRY_VALUES: tuple[str, ...] = ("SteamPath", "InstallPath")

# --- Text Patterns ---
# "path"  "D:\\SteamLibrary"
LIBRARY_PATH_PATTERN = re.compile(r'"path"\s*"([^"]+)"', re.IGNORECASE)
# Any quoted drive-letter path, for format variants the key pattern misses
DRIVE_PATH_PATTERN = re.compile(r'"([A-Za-z]:\\[^"\r\n]+)"')
MANIFEST_APPID_PATTERN = re.compile(r'"appid"\s*"(\d+)"', re.IGNORECASE)
MANIFEST_NAME_PATTERN = re.compile(r'"name"\s*"([^"]+)"', re.IGNORECASE)
