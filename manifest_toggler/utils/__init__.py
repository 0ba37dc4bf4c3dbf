from .system_utils import SystemUtils

__all__ = ["SystemUtils"]
