"""Folder content enumeration."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Callable, Generator
from pathlib import Path
from typing import TYPE_CHECKING

from locus_fs.context import LocationContext, get_context
from locus_fs.filesystem import supports_file_flags
from locus_fs.state import PathState

if TYPE_CHECKING:
    from locus_fs.location import File, Folder

logger = logging.getLogger(__name__)

Visitor = Callable[["File | Folder"], bool]
PathFilter = Callable[[Path], bool]


def is_hidden_entry(entry: os.DirEntry[str]) -> bool:
    """Dot-names are hidden everywhere; BSD platforms also honour UF_HIDDEN."""
    if entry.name.startswith("."):
        return True
    if supports_file_flags() and hasattr(stat, "UF_HIDDEN"):
        try:
            flags = getattr(entry.stat(follow_symlinks=False), "st_flags", 0)
        except OSError:
            return False
        return bool(flags & stat.UF_HIDDEN)
    return False


def _entry_state(entry: os.DirEntry[str]) -> PathState:
    """Classify an entry by its own type, never following links."""
    try:
        if entry.is_dir(follow_symlinks=False):
            return PathState.FOLDER
        if entry.is_file(follow_symlinks=False):
            return PathState.FILE
    except OSError:
        pass
    # Symlinks, sockets, devices and vanished entries are not reported
    return PathState.UNKNOWN


def walk_entries(
    folder: str,
    shallow: bool = True,
    include_hidden: bool = False,
    recurse_into_packages: bool = False,
    context: LocationContext | None = None,
) -> Generator[tuple[str, PathState], None, None]:
    """Walk a folder depth-first, yielding each entry before its children.

    Directories are read lazily, so closing the iterator stops all further
    directory reads.

    Args:
        folder: Absolute path of the folder to walk.
        shallow: Only yield immediate children.
        include_hidden: Include hidden entries (and walk hidden folders).
        recurse_into_packages: Descend into package directories such as
            ``Example.app``.
        context: Overrides the active context.

    Yields:
        (path, state) pairs where state is FILE or FOLDER.
    """
    context = context or get_context()
    with context.file_manager.scan_directory(folder) as entries:
        for entry in entries:
            if not include_hidden and is_hidden_entry(entry):
                continue
            state = _entry_state(entry)
            if state == PathState.UNKNOWN:
                continue

            yield entry.path, state

            if state != PathState.FOLDER or shallow:
                continue
            if not recurse_into_packages and context.settings.is_package_name(entry.name):
                continue
            try:
                yield from walk_entries(
                    entry.path,
                    shallow=False,
                    include_hidden=include_hidden,
                    recurse_into_packages=recurse_into_packages,
                    context=context,
                )
            except (PermissionError, FileNotFoundError) as e:
                logger.debug("Skipping unreadable folder %s: %s", entry.path, e)


def _make_location(path: str, state: PathState) -> File | Folder:
    from locus_fs.location import File, Folder

    if state == PathState.FOLDER:
        return Folder(path)
    return File(path)


def enumerate_content(
    folder: str,
    visit: Visitor,
    shallow: bool = True,
    include_hidden: bool = False,
    recurse_into_packages: bool = False,
) -> None:
    """Call visit with a File or Folder for each entry in a folder.

    Returning False from visit stops the enumeration; entries not yet
    visited are dropped.
    """
    entries = walk_entries(folder, shallow, include_hidden, recurse_into_packages)
    try:
        for path, state in entries:
            if visit(_make_location(path, state)) is False:
                logger.debug("Enumeration of %s stopped by visitor", folder)
                return
    finally:
        entries.close()


def all_content(
    folder: str,
    shallow: bool = True,
    include_hidden: bool = False,
    recurse_into_packages: bool = False,
    state: PathState | None = None,
    predicate: PathFilter | None = None,
) -> list[File | Folder]:
    """Collect the contents of a folder in enumeration order.

    Args:
        folder: Absolute path of the folder.
        shallow: Only list immediate children.
        include_hidden: Include hidden entries.
        recurse_into_packages: Descend into package directories.
        state: Keep only FILE or FOLDER entries.
        predicate: Keep only entries whose path it accepts.

    Returns:
        The matching locations.
    """
    result: list[File | Folder] = []
    for path, entry_state in walk_entries(folder, shallow, include_hidden, recurse_into_packages):
        if predicate is not None and not predicate(Path(path)):
            continue
        if state is None or state == entry_state:
            result.append(_make_location(path, entry_state))
    return result
