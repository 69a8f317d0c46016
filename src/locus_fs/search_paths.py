"""Well-known per-user folders.

macOS uses the ~/Library layout. Everywhere else the XDG base directory
variables and the xdg-user-dirs configuration file are consulted.
"""

from __future__ import annotations

import os
import re
import sys
import tempfile
from pathlib import Path

from locus_fs.types import SearchPathDirectory

# Keys in user-dirs.dirs for the folders it can relocate
_USER_DIR_KEYS = {
    SearchPathDirectory.DOCUMENTS: "XDG_DOCUMENTS_DIR",
    SearchPathDirectory.DESKTOP: "XDG_DESKTOP_DIR",
    SearchPathDirectory.DOWNLOADS: "XDG_DOWNLOAD_DIR",
}

_DEFAULT_NAMES = {
    SearchPathDirectory.DOCUMENTS: "Documents",
    SearchPathDirectory.DESKTOP: "Desktop",
    SearchPathDirectory.DOWNLOADS: "Downloads",
}

_USER_DIR_LINE = re.compile(r'^\s*(XDG_[A-Z]+_DIR)\s*=\s*"(.*)"\s*$')


def home_directory() -> str:
    """The invoking user's home directory."""
    return str(Path.home())


def temporary_directory() -> str:
    """The user's temporary directory."""
    return os.path.abspath(tempfile.gettempdir())


def _xdg_home(variable: str, fallback: str) -> Path:
    value = os.environ.get(variable)
    if value and os.path.isabs(value):
        return Path(value)
    return Path.home() / fallback


def read_user_dirs() -> dict[str, str]:
    """Parse $XDG_CONFIG_HOME/user-dirs.dirs into {key: absolute path}."""
    config = _xdg_home("XDG_CONFIG_HOME", ".config") / "user-dirs.dirs"
    if not config.is_file():
        return {}

    result: dict[str, str] = {}
    for line in config.read_text().splitlines():
        match = _USER_DIR_LINE.match(line)
        if not match:
            continue
        key, value = match.groups()
        value = value.replace("$HOME", home_directory())
        if os.path.isabs(value):
            result[key] = os.path.normpath(value)
    return result


def user_search_paths(kind: SearchPathDirectory) -> list[str]:
    """Candidate paths for a well-known user folder, most specific first.

    An empty list means the platform has no such folder for this user.
    """
    home = Path.home()

    if sys.platform == "darwin":
        mac_names = {
            SearchPathDirectory.LIBRARY: "Library",
            SearchPathDirectory.CACHES: "Library/Caches",
            SearchPathDirectory.TRASH: ".Trash",
            **_DEFAULT_NAMES,
        }
        return [str(home / mac_names[kind])]

    if kind in _USER_DIR_KEYS:
        configured = read_user_dirs().get(_USER_DIR_KEYS[kind])
        # xdg-user-dirs points disabled folders at $HOME itself
        if configured and configured != str(home):
            return [configured]
        default = home / _DEFAULT_NAMES[kind]
        return [str(default)] if default.is_dir() else []

    if kind == SearchPathDirectory.CACHES:
        return [str(_xdg_home("XDG_CACHE_HOME", ".cache"))]
    data_home = _xdg_home("XDG_DATA_HOME", ".local/share")
    if kind == SearchPathDirectory.LIBRARY:
        return [str(data_home)]
    return [str(data_home / "Trash")]
