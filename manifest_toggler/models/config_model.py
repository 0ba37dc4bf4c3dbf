# manifest_toggler/models/config_model.py
from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class AppConfig:
    """Holds the application's persisted configuration state. Immutable."""

    # --- Last Session State ---
    steam_root: str | None = None

    # --- Global Settings ---
    backup_on_toggle: bool = True
