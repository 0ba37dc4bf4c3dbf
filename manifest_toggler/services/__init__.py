from .config_service import ConfigService, ConfigSaveError
from .library_service import LibraryService
from .manifest_service import ManifestService, ManifestNotFoundError
from .path_service import PathService
from .scanner_service import (
    ScannerService,
    ScanError,
    LibraryConfigNotFoundError,
    LibraryConfigReadError,
)

__all__ = [
    "ConfigService",
    "ConfigSaveError",
    "LibraryService",
    "ManifestService",
    "ManifestNotFoundError",
    "PathService",
    "ScannerService",
    "ScanError",
    "LibraryConfigNotFoundError",
    "LibraryConfigReadError",
]
