"""Protocol definitions for core abstractions.

This module defines the two interfaces the rest of the library is written
against:
- Location: the capability shared by File and Folder values
- FileManager: the OS primitive set every operation is delegated to

Concrete implementations satisfy these protocols structurally (duck typing);
File and Folder do not inherit from Location.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from contextlib import AbstractContextManager
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable

from locus_fs.state import PathState
from locus_fs.types import AttributeKey

if TYPE_CHECKING:
    from locus_fs.location import File, Folder

_T = TypeVar("_T", bound="Location")


@runtime_checkable
class Location(Protocol):
    """Protocol for a typed filesystem location.

    A location is identified by its absolute, normalized path. Accessors
    query the OS on every call; nothing is cached. Operations that produce
    a new location return the same concrete type they were called on.
    """

    path: str

    @property
    def location_path(self) -> Path:
        """The location as a pathlib Path."""
        ...

    @property
    def url(self) -> str:
        """The location as a file:// URL."""
        ...

    @property
    def basename(self) -> str: ...

    @property
    def name(self) -> str:
        """The basename without its extension."""
        ...

    @property
    def extension(self) -> str: ...

    @property
    def display_name(self) -> str: ...

    @property
    def state(self) -> PathState:
        """What currently exists at the location."""
        ...

    @property
    def exists(self) -> bool: ...

    @property
    def does_not_exist(self) -> bool: ...

    @property
    def is_file(self) -> bool: ...

    @property
    def is_folder(self) -> bool: ...

    @property
    def is_symlink(self) -> bool: ...

    @property
    def is_alias(self) -> bool: ...

    @property
    def is_hidden(self) -> bool: ...

    @property
    def parent(self) -> Folder:
        """The containing folder."""
        ...

    def actualize(
        self: _T, attributes: Mapping[AttributeKey, Any] | None = None, create: bool = True
    ) -> _T:
        """Make the location exist on disk.

        Args:
            attributes: Attributes applied to a newly created entry.
            create: If False, a missing entry is left missing.

        Returns:
            The location itself.
        """
        ...

    def attributes(self) -> dict[AttributeKey, Any]:
        """Attribute snapshot, empty if nothing exists at the location."""
        ...

    def set_attributes(self, values: Mapping[AttributeKey, Any]) -> None: ...

    def delete(self) -> None: ...

    def move_to_trash(self: _T) -> _T | None:
        """Move to the user trash, returning the trashed location if known."""
        ...

    def move(self: _T, into: Folder) -> _T: ...

    def copy(self: _T, into: Folder) -> _T: ...

    def rename(self: _T, new_name: str) -> _T: ...

    def create_symlink(self: _T, destination: Location | str | os.PathLike[str]) -> _T:
        """Create a symbolic link at destination pointing to this location."""
        ...

    def resolving_symlinks(self: _T) -> _T: ...

    def create_alias(self, destination: Location | str | os.PathLike[str]) -> File:
        """Write an alias file at destination that refers to this location."""
        ...

    def resolving_alias(self) -> File | Folder: ...

@runtime_checkable
class FileManager(Protocol):
    """Protocol for the OS filesystem primitives.

    Implementations perform no validation of their own beyond what the OS
    enforces; typed precondition errors are raised by the callers.
    """

    def classify(self, path: str) -> PathState:
        """Classify a path as FOLDER, FILE or UNKNOWN."""
        ...

    def create_file(
        self, path: str, contents: bytes = b"", attributes: Mapping[AttributeKey, Any] | None = None
    ) -> None:
        """Create a file that must not already exist.

        Args:
            path: Path of the new file.
            contents: Initial content.
            attributes: Attributes to apply after creation.

        Raises:
            OSError: If the file could not be created.
        """
        ...

    def create_directory(
        self,
        path: str,
        with_intermediates: bool = True,
        attributes: Mapping[AttributeKey, Any] | None = None,
    ) -> None:
        """Create a directory.

        Args:
            path: Path of the new directory.
            with_intermediates: Create missing parent directories.
            attributes: Attributes to apply after creation.
        """
        ...

    def move_item(self, src: str, dst: str) -> None:
        """Move or rename a file or directory."""
        ...

    def copy_item(self, src: str, dst: str) -> None:
        """Copy a file, or a directory recursively."""
        ...

    def remove_item(self, path: str) -> None:
        """Remove a file, or a directory recursively."""
        ...

    def lexists(self, path: str) -> bool:
        """Check whether anything, including a dangling symlink, is at path."""
        ...

    def is_symlink(self, path: str) -> bool:
        """Check whether path is a symbolic link, without following it."""
        ...

    def create_symbolic_link(self, path: str, target: str) -> None:
        """Create a symbolic link at path pointing to target."""
        ...

    def trash_item(self, path: str) -> str | None:
        """Move an item to the user trash.

        Returns:
            Path of the item inside the trash, or None if unknown.
        """
        ...

    def attributes_of_item(self, path: str) -> dict[AttributeKey, Any]:
        """Return an attribute snapshot, without following a final symlink.

        Raises:
            FileNotFoundError: If nothing exists at path.
        """
        ...

    def set_attributes(self, values: Mapping[AttributeKey, Any], path: str) -> None:
        """Apply settable attributes to an existing item."""
        ...

    def scan_directory(self, path: str) -> AbstractContextManager[Iterator[os.DirEntry[str]]]:
        """Open a directory listing, in OS order."""
        ...

    def read_bytes(self, path: str, limit: int | None = None) -> bytes:
        """Read up to limit bytes from a file."""
        ...

    def write_bytes(self, path: str, data: bytes) -> None:
        """Write data to a file, replacing any content."""
        ...
