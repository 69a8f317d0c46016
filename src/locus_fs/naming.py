"""Path naming helpers: tilde expansion and unique names."""

from __future__ import annotations

import logging
import os
import random
from datetime import datetime
from pathlib import Path

from locus_fs.config import LocationSettings
from locus_fs.context import get_context
from locus_fs.errors import CouldNotGenerateUniqueNameError, FileOrFolderDoesNotExistError
from locus_fs.state import PathState

logger = logging.getLogger(__name__)

__all__ = ["dated_name", "expand_tilde", "normalize_path", "unique_name_in_folder"]


def expand_tilde(path: str) -> str:
    """Replace a leading ~ with the invoking user's home directory.

    Only the prefix is substituted; ~user forms and environment variables
    are left alone, and surrounding whitespace is stripped.

    Example:
        >>> expand_tilde("~/Desktop/noodle.txt")  # doctest: +SKIP
        '/home/womble/Desktop/noodle.txt'
    """
    path = path.strip()
    if path.startswith("~"):
        return str(Path.home()) + path[1:]
    return path


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Expand ~, make absolute and collapse redundant separators."""
    return os.path.abspath(expand_tilde(os.fspath(path)))


def make_token(settings: LocationSettings) -> str:
    """Draw a random token from the settings alphabet."""
    return "".join(random.choice(settings.token_alphabet) for _ in range(settings.token_length))


def unique_name_in_folder(
    folder: str,
    prefix: str | None = None,
    extension: str = "",
    settings: LocationSettings | None = None,
) -> str:
    """Generate a path inside folder that does not currently exist.

    Names have the form ``<prefix>_<token>[.<extension>]``. Nothing is
    reserved on disk, so two callers racing on the same folder can still
    collide.

    Args:
        folder: Absolute path of an existing folder.
        prefix: Name prefix. Defaults to the settings default ("tmp").
        extension: Optional extension, without the dot.
        settings: Overrides the active context's settings.

    Returns:
        Absolute path of the unused name.

    Raises:
        FileOrFolderDoesNotExistError: If folder is not an existing folder.
        CouldNotGenerateUniqueNameError: If every attempt collided.
    """
    context = get_context()
    settings = settings or context.settings
    fm = context.file_manager

    if fm.classify(folder) != PathState.FOLDER:
        raise FileOrFolderDoesNotExistError(folder)

    prefix = settings.default_prefix if prefix is None else prefix
    suffix = f".{extension}" if extension else ""

    for _ in range(settings.max_attempts):
        candidate = os.path.join(folder, f"{prefix}_{make_token(settings)}{suffix}")
        if fm.classify(candidate) == PathState.UNKNOWN and not fm.lexists(candidate):
            return candidate
        logger.debug("Unique name candidate collided: %s", candidate)

    raise CouldNotGenerateUniqueNameError(folder)


def dated_name(now: datetime | None = None) -> str:
    """Timestamp used for dated folders, e.g. 2024-05-01T134502-123456+1000."""
    now = now or datetime.now().astimezone()
    return now.strftime("%Y-%m-%dT%H%M%S-%f%z")
