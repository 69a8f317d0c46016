"""Library context for dependency injection.

Location values own nothing but their path, so the services they delegate
to (the OS primitives and the settings) live in a LocationContext. The
active context is process-wide; use_context() swaps it for the duration of
a with block, which is how tests substitute test doubles.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from locus_fs.config import LocationSettings
from locus_fs.protocols import FileManager


def _default_file_manager() -> FileManager:
    """Create the default file manager implementation."""
    from locus_fs.filesystem import RealFileManager

    return RealFileManager()


@dataclass(frozen=True)
class LocationContext:
    """Container for the services used by File and Folder.

    The file manager is typed with the FileManager Protocol, so any object
    with the right methods (including a MagicMock) can be injected.
    """

    file_manager: FileManager = field(default_factory=_default_file_manager)
    settings: LocationSettings = field(default_factory=LocationSettings.create_default)


_lock = threading.Lock()
_active: LocationContext | None = None


def create_context(
    file_manager: FileManager | None = None,
    settings: LocationSettings | None = None,
) -> LocationContext:
    """Factory for a library context.

    Args:
        file_manager: Override the OS primitives (for testing).
        settings: Override the default settings.

    Returns:
        Configured LocationContext.
    """
    return LocationContext(
        file_manager=file_manager or _default_file_manager(),
        settings=settings or LocationSettings.create_default(),
    )


def get_context() -> LocationContext:
    """Return the active context, creating the default one on first use."""
    global _active
    with _lock:
        if _active is None:
            _active = create_context()
        return _active


def set_context(context: LocationContext | None) -> None:
    """Replace the active context. None restores the default on next use."""
    global _active
    with _lock:
        _active = context


@contextmanager
def use_context(context: LocationContext) -> Iterator[LocationContext]:
    """Make context the active one inside a with block."""
    previous = get_context()
    set_context(context)
    try:
        yield context
    finally:
        set_context(previous)
