"""
Settings - QSettings backed configuration and console debug output
"""

import os
from typing import Optional, Tuple

from PyQt6.QtCore import QSettings


ORGANIZATION = "visxml.net"
APPLICATION = "LotusBookmarks"

DEFAULT_HIGHLIGHT_COLOR = "#fff0c8"

# key: (type, default)
DEFAULTS = {
    "debug_mode": ("bool", False),
    "prune_invalidated": ("bool", False),
    "project_root": ("str", ""),
    "highlight_color": ("str", DEFAULT_HIGHLIGHT_COLOR),
}


def get_settings() -> QSettings:
    return QSettings(ORGANIZATION, APPLICATION)


def _to_bool(value, default: bool) -> bool:
    # QSettings may hand back "true"/"false" strings depending on the backend
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes", "on")
    return bool(value)


class BookmarkSettings:
    """Typed access to the bookmark settings"""

    def __init__(self, settings: Optional[QSettings] = None):
        self._settings = settings if settings is not None else get_settings()

    @property
    def qsettings(self) -> QSettings:
        return self._settings

    def value(self, key: str):
        """Read a setting, falling back to its default"""
        value_type, default = DEFAULTS[key]
        try:
            raw = self._settings.value(key)
        except Exception as e:
            print(f"Error reading setting '{key}': {e}")
            return default
        if value_type == "bool":
            return _to_bool(raw, default)
        if raw is None:
            return default
        return str(raw)

    def set_value(self, key: str, value):
        try:
            self._settings.setValue(key, value)
        except Exception as e:
            print(f"Error saving setting '{key}': {e}")

    @property
    def debug_mode(self) -> bool:
        return self.value("debug_mode")

    @property
    def prune_invalidated(self) -> bool:
        return self.value("prune_invalidated")

    @property
    def highlight_color(self) -> str:
        return self.value("highlight_color") or DEFAULT_HIGHLIGHT_COLOR

    @property
    def project_root(self) -> str:
        """Configured project root, or the current working directory"""
        root = self.value("project_root")
        return os.path.abspath(root) if root else os.getcwd()


_debug_enabled = False


def set_debug(enabled: bool):
    """Turn DEBUG console messages on or off"""
    global _debug_enabled
    _debug_enabled = bool(enabled)


def debug(message: str):
    """Print a DEBUG message when debug mode is on"""
    if _debug_enabled:
        print(f"DEBUG: {message}")


def relativize_path(path: str, project_root: str) -> Tuple[Optional[str], str]:
    """
    Split an absolute path into (project root, path relative to it).

    Paths outside the project come back unchanged with a None root.
    """
    if not path:
        return None, path
    root = os.path.abspath(project_root) if project_root else ""
    if root:
        absolute = os.path.abspath(path)
        try:
            common = os.path.commonpath([root, absolute])
        except ValueError:
            # Different drives on Windows
            common = ""
        if common == root and absolute != root:
            return root, os.path.relpath(absolute, root)
    return None, path
