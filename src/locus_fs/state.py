"""Classification of filesystem paths."""

from __future__ import annotations

import os
import stat
from enum import Enum

__all__ = ["PathState", "classify"]


class PathState(Enum):
    """What currently exists at a path.

    This is a snapshot taken when classify() runs; it is never cached.
    """

    FOLDER = "folder"
    FILE = "file"
    UNKNOWN = "unknown"


def classify(path: str | os.PathLike[str]) -> PathState:
    """Classify a path by querying the OS.

    Symbolic links are followed, so a link to a folder is a FOLDER and a
    dangling link is UNKNOWN.

    Args:
        path: Absolute filesystem path.

    Returns:
        The PathState of the path at call time.
    """
    try:
        st = os.stat(path)
    except OSError:
        # Missing, unreadable or looping paths cannot be shown to exist
        return PathState.UNKNOWN
    if stat.S_ISDIR(st.st_mode):
        return PathState.FOLDER
    return PathState.FILE
