"""File and Folder location values.

File and Folder are sibling frozen dataclasses holding nothing but an
absolute, normalized path. Neither derives from the other: the members
common to both (attribute accessors and the move/copy/rename/delete/link
operations) live on the LocationMembers mixin. Both classes satisfy the
locus_fs.protocols.Location protocol.

Every accessor queries the OS when called. Mutations re-check the state of
their source and destination immediately before delegating to the active
FileManager and return a new value bound to the resulting path.
"""

from __future__ import annotations

import logging
import mimetypes
import os
import stat
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, TypeVar

from locus_fs import alias, enumeration, search_paths
from locus_fs.context import get_context
from locus_fs.errors import (
    CouldNotCreateFileError,
    CouldNotLocateSearchPathError,
    DestinationExistsAtPathError,
    DestinationFolderDoesNotExistError,
    FileExistsAtPathError,
    FileOrFolderDoesNotExistError,
    FolderExistsAtPathError,
    UnknownLocationError,
)
from locus_fs.naming import dated_name, normalize_path, unique_name_in_folder
from locus_fs.state import PathState
from locus_fs.types import AttributeKey, SearchPathDirectory, settable_attributes

if TYPE_CHECKING:
    from locus_fs.enumeration import PathFilter, Visitor
    from locus_fs.protocols import FileManager, Location

logger = logging.getLogger(__name__)

__all__ = ["File", "Folder", "LocationMembers"]

_L = TypeVar("_L", bound="LocationMembers")

FOLDER_TYPE_IDENTIFIER = "inode/directory"


def _file_manager() -> FileManager:
    return get_context().file_manager


def _target_path(destination: Location | str | os.PathLike[str]) -> str:
    if isinstance(destination, (File, Folder)):
        return destination.path
    return normalize_path(destination)


def _occupied(path: str) -> bool:
    """True if anything, including a dangling symlink, sits at path."""
    fm = _file_manager()
    return fm.classify(path) != PathState.UNKNOWN or fm.lexists(path)


@contextmanager
def _os_failure(action: str, path: str) -> Iterator[None]:
    """Wrap an OSError raised by the file manager in UnknownLocationError."""
    try:
        yield
    except OSError as e:
        raise UnknownLocationError(f"Could not {action} {path}: {e}") from e


class LocationMembers:
    """Members shared by File and Folder.

    A plain mixin: it holds no state and declares no dataclass fields.
    """

    path: str

    if TYPE_CHECKING:

        def __init__(self, path: str) -> None: ...

        @classmethod
        def create(cls: type[_L], path: str | os.PathLike[str]) -> _L: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"

    # Identity

    @property
    def location_path(self) -> Path:
        """The location as a pathlib Path."""
        return Path(self.path)

    @property
    def url(self) -> str:
        """The location as a file:// URL."""
        return Path(self.path).as_uri()

    @property
    def basename(self) -> str:
        """The name of the file/folder, including any extension."""
        return os.path.basename(self.path)

    @property
    def name(self) -> str:
        """The name without the extension."""
        return os.path.splitext(self.basename)[0]

    @property
    def extension(self) -> str:
        """The extension without its leading dot, or an empty string."""
        return os.path.splitext(self.basename)[1][1:]

    @property
    def display_name(self) -> str:
        """User-facing name. Only for display, never for filesystem calls."""
        return self.basename or self.path

    @property
    def parent(self) -> Folder:
        """The folder containing this location."""
        return Folder(os.path.dirname(self.path))

    @property
    def standardized(self: _L) -> _L:
        """This location with its path normalized again."""
        return type(self)(os.path.normpath(self.path))

    # State

    @property
    def state(self) -> PathState:
        """What currently exists at the location."""
        return _file_manager().classify(self.path)

    @property
    def exists(self) -> bool:
        return self.state != PathState.UNKNOWN

    @property
    def does_not_exist(self) -> bool:
        return not self.exists

    @property
    def is_folder(self) -> bool:
        return self.state == PathState.FOLDER

    @property
    def is_file(self) -> bool:
        return self.state == PathState.FILE

    @property
    def is_symlink(self) -> bool:
        return _file_manager().is_symlink(self.path)

    @property
    def is_alias(self) -> bool:
        """Is this location an alias file?"""
        return alias.read_alias(self.path, get_context()) is not None

    @property
    def is_hidden(self) -> bool:
        """Dot-named, or flagged hidden on platforms with file flags."""
        if self.basename.startswith("."):
            return True
        try:
            st = os.lstat(self.path)
        except OSError:
            return False
        return bool(getattr(st, "st_flags", 0) & getattr(stat, "UF_HIDDEN", 0))

    # Permissions

    @property
    def is_readable(self) -> bool:
        return os.access(self.path, os.R_OK)

    @property
    def is_writable(self) -> bool:
        return os.access(self.path, os.W_OK)

    @property
    def is_executable(self) -> bool:
        return os.access(self.path, os.X_OK)

    @property
    def is_deletable(self) -> bool:
        """Can the current process remove this entry from its parent?"""
        if not _file_manager().lexists(self.path):
            return False
        return os.access(os.path.dirname(self.path), os.W_OK | os.X_OK)

    # Attributes

    def attributes(self) -> dict[AttributeKey, Any]:
        """Snapshot of the item's attributes; empty if it doesn't exist."""
        try:
            return _file_manager().attributes_of_item(self.path)
        except OSError:
            return {}

    def set_attributes(self, values: Mapping[AttributeKey, Any]) -> None:
        """Apply attributes (permissions, modification date, immutable flag).

        Raises:
            FileOrFolderDoesNotExistError: If the item doesn't exist.
            ValueError: If a key is read-only.
        """
        if not _file_manager().lexists(self.path):
            raise FileOrFolderDoesNotExistError(self.path)
        _file_manager().set_attributes(values, self.path)

    def set_attribute(self, key: AttributeKey, value: Any) -> None:
        """Apply a single attribute."""
        self.set_attributes({key: value})

    @property
    def creation_date(self) -> datetime | None:
        """Birth time, when the platform records one."""
        return self.attributes().get(AttributeKey.CREATION_DATE)

    @property
    def modification_date(self) -> datetime | None:
        return self.attributes().get(AttributeKey.MODIFICATION_DATE)

    @property
    def is_locked(self) -> bool:
        """Is the item locked against modification?"""
        return bool(self.attributes().get(AttributeKey.IMMUTABLE, False))

    def set_locked(self, locked: bool) -> None:
        """Lock or unlock the item."""
        self.set_attribute(AttributeKey.IMMUTABLE, locked)

    # Content type

    def type_identifier(self) -> str | None:
        """MIME type of the item, e.g. "text/plain"."""
        state = self.state
        if state == PathState.FOLDER:
            return FOLDER_TYPE_IDENTIFIER
        if state == PathState.UNKNOWN:
            return None
        return mimetypes.guess_type(self.path, strict=False)[0]

    def conforms_to(self, type_identifier: str) -> bool:
        """Does the item's type match type_identifier?

        Accepts an exact type ("text/plain"), a wildcard ("text/*") or a
        bare major type ("text").
        """
        actual = self.type_identifier()
        if actual is None:
            return False
        if actual == type_identifier:
            return True
        major = type_identifier.removesuffix("/*")
        return "/" not in major and actual.split("/", 1)[0] == major

    # Removal

    def delete(self) -> None:
        """Remove the item from disk. Folders are removed with their contents."""
        _file_manager().remove_item(self.path)
        logger.debug("Deleted %s", self.path)

    def move_to_trash(self: _L) -> _L | None:
        """Move the item to the user trash.

        Returns:
            The location inside the trash, or None if the platform doesn't
            report where the item went.

        Raises:
            FileOrFolderDoesNotExistError: If the item doesn't exist.
        """
        if not self.exists:
            raise FileOrFolderDoesNotExistError(self.path)

        with _os_failure("trash", self.path):
            trashed = _file_manager().trash_item(self.path)
        logger.debug("Trashed %s -> %s", self.path, trashed)
        return type(self)(trashed) if trashed else None

    # Links

    def resolving_symlinks(self: _L) -> _L:
        """This location with every symlink in its path resolved."""
        return type(self)(os.path.realpath(self.path))

    def create_symlink(self: _L, destination: Location | str | os.PathLike[str]) -> _L:
        """Create a symbolic link at destination pointing to this location.

        Raises:
            FileOrFolderDoesNotExistError: If this location doesn't exist.
            DestinationExistsAtPathError: If anything exists at destination.
        """
        if not self.exists:
            raise FileOrFolderDoesNotExistError(self.path)
        target = _target_path(destination)
        if _occupied(target):
            raise DestinationExistsAtPathError(target)

        with _os_failure("create symlink at", target):
            _file_manager().create_symbolic_link(target, self.path)
        logger.debug("Linked %s -> %s", target, self.path)
        return type(self).create(target)

    def create_alias(self, destination: Location | str | os.PathLike[str]) -> File:
        """Create an alias file at destination referring to this location.

        The alias is always a File, even when this location is a folder.

        Raises:
            FileOrFolderDoesNotExistError: If this location doesn't exist.
            DestinationExistsAtPathError: If anything exists at destination.
        """
        if not self.exists:
            raise FileOrFolderDoesNotExistError(self.path)
        target = _target_path(destination)
        if _occupied(target):
            raise DestinationExistsAtPathError(target)

        with _os_failure("create alias at", target):
            alias.write_alias(self.path, target, get_context())
        logger.debug("Created alias %s -> %s", target, self.path)
        return File(target)

    def resolving_alias(self) -> File | Folder:
        """Resolve an alias file. Non-alias locations return themselves.

        Raises:
            FileOrFolderDoesNotExistError: If the alias target is gone.
        """
        record = alias.read_alias(self.path, get_context())
        if record is None:
            return self

        resolved = normalize_path(record.target)
        state = _file_manager().classify(resolved)
        if state == PathState.FILE:
            return File(resolved)
        if state == PathState.FOLDER:
            return Folder(resolved)
        raise FileOrFolderDoesNotExistError(resolved)

    # Move / copy / rename

    def _destination_in(self, folder: Folder) -> str:
        if not self.exists:
            raise FileOrFolderDoesNotExistError(self.path)
        if _file_manager().classify(folder.path) != PathState.FOLDER:
            raise DestinationFolderDoesNotExistError(folder.path)
        destination = os.path.join(folder.path, self.basename)
        if _occupied(destination):
            raise DestinationExistsAtPathError(destination)
        return destination

    def move(self: _L, into: Folder) -> _L:
        """Move this item into a folder.

        Returns:
            The item at its new path. This value becomes stale.

        Raises:
            FileOrFolderDoesNotExistError: If this item doesn't exist.
            DestinationFolderDoesNotExistError: If into isn't an existing folder.
            DestinationExistsAtPathError: If into already has an entry with this name.
            UnknownLocationError: If the OS move fails.
        """
        destination = self._destination_in(into)
        with _os_failure("move", self.path):
            _file_manager().move_item(self.path, destination)
        logger.debug("Moved %s -> %s", self.path, destination)
        return type(self).create(destination)

    def copy(self: _L, into: Folder) -> _L:
        """Copy this item into a folder, recursively for folders.

        Raises:
            FileOrFolderDoesNotExistError: If this item doesn't exist.
            DestinationFolderDoesNotExistError: If into isn't an existing folder.
            DestinationExistsAtPathError: If into already has an entry with this name.
            UnknownLocationError: If the OS copy fails.
        """
        destination = self._destination_in(into)
        with _os_failure("copy", self.path):
            _file_manager().copy_item(self.path, destination)
        logger.debug("Copied %s -> %s", self.path, destination)
        return type(self).create(destination)

    def rename(self: _L, new_name: str) -> _L:
        """Rename this item within its parent folder.

        Raises:
            ValueError: If new_name is empty, "." or "..", or contains a
                path separator.
            FileOrFolderDoesNotExistError: If this item doesn't exist.
            DestinationExistsAtPathError: If the sibling name is taken.
            UnknownLocationError: If the OS rename fails.
        """
        _check_child_name(new_name)
        if not self.exists:
            raise FileOrFolderDoesNotExistError(self.path)

        destination = os.path.join(os.path.dirname(self.path), new_name)
        if _occupied(destination):
            raise DestinationExistsAtPathError(destination)

        with _os_failure("rename", self.path):
            _file_manager().move_item(self.path, destination)
        logger.debug("Renamed %s -> %s", self.path, destination)
        return type(self).create(destination)


def _check_child_name(name: str) -> None:
    """Reject names that would resolve outside the folder."""
    if not name:
        raise ValueError("Name cannot be empty")
    if name in (os.curdir, os.pardir):
        raise ValueError(f"Name cannot be {name!r}")
    if os.sep in name or (os.altsep and os.altsep in name):
        raise ValueError(f"Name cannot contain a path separator: {name!r}")


@dataclass(frozen=True, repr=False)
class File(LocationMembers):
    """A file, which may or may not exist yet.

    Construction never touches the disk. Use File.create() to reject a
    path currently occupied by a folder.
    """

    path: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", normalize_path(self.path))

    def __fspath__(self) -> str:
        return self.path

    @classmethod
    def create(cls, path: str | os.PathLike[str]) -> File:
        """Create a File, failing if a folder exists at path.

        Raises:
            FolderExistsAtPathError: If path is an existing folder.
        """
        path = normalize_path(path)
        if _file_manager().classify(path) == PathState.FOLDER:
            raise FolderExistsAtPathError(path)
        return cls(path)

    def actualize(
        self, attributes: Mapping[AttributeKey, Any] | None = None, create: bool = True
    ) -> File:
        """Make the file exist on disk if it doesn't yet.

        The parent folder is actualized first.

        Args:
            attributes: Attributes for a newly created file.
            create: If False, a missing file is left missing.

        Returns:
            This file.

        Raises:
            FolderExistsAtPathError: If a folder exists at the path.
            CouldNotCreateFileError: If the file could not be created.
            ValueError: If an attribute key is read-only.
        """
        state = self.state
        if state == PathState.FOLDER:
            raise FolderExistsAtPathError(self.path)
        if state == PathState.UNKNOWN and create:
            if attributes:
                attributes = settable_attributes(attributes)
            self.parent.actualize(create=True)
            try:
                _file_manager().create_file(self.path, b"", attributes)
            except OSError as e:
                raise CouldNotCreateFileError(self.path) from e
            logger.debug("Created file %s", self.path)
        return self

    @property
    def file_size(self) -> int | None:
        """Size in bytes, or None if the file doesn't exist."""
        return self.attributes().get(AttributeKey.SIZE)

    @classmethod
    def temporary(cls, prefix: str = "tmp", extension: str = "", create: bool = False) -> File:
        """A uniquely named file in a fresh temporary folder."""
        return Folder.temporary(create=True).create_unique_file(prefix, extension, create)

    @classmethod
    def temporary_named(cls, name: str, create: bool = False) -> File:
        """A file with a specific name in a fresh temporary folder."""
        return Folder.temporary(create=True).file(name, create=create)


@dataclass(frozen=True, repr=False)
class Folder(LocationMembers):
    """A folder, which may or may not exist yet.

    Construction never touches the disk. Use Folder.create() to reject a
    path currently occupied by a file.
    """

    path: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", normalize_path(self.path))

    def __fspath__(self) -> str:
        return self.path

    @classmethod
    def create(cls, path: str | os.PathLike[str]) -> Folder:
        """Create a Folder, failing if a file exists at path.

        Raises:
            FileExistsAtPathError: If path is an existing file.
        """
        path = normalize_path(path)
        if _file_manager().classify(path) == PathState.FILE:
            raise FileExistsAtPathError(path)
        return cls(path)

    def actualize(
        self, attributes: Mapping[AttributeKey, Any] | None = None, create: bool = True
    ) -> Folder:
        """Make the folder exist on disk, including intermediate folders.

        Args:
            attributes: Attributes for a newly created folder.
            create: If False, a missing folder is left missing.

        Returns:
            This folder.

        Raises:
            FileExistsAtPathError: If a file exists at the path.
            ValueError: If an attribute key is read-only.
        """
        state = self.state
        if state == PathState.FILE:
            raise FileExistsAtPathError(self.path)
        if state == PathState.UNKNOWN and create:
            if attributes:
                attributes = settable_attributes(attributes)
            with _os_failure("create folder", self.path):
                _file_manager().create_directory(self.path, True, attributes)
            logger.debug("Created folder %s", self.path)
        return self

    # Temporary folders

    @classmethod
    def temporary(cls, create: bool = False) -> Folder:
        """A new, uniquely named folder inside the user temporary folder."""
        return cls.user_temporary_folder().create_unique_subfolder(create=create)

    @classmethod
    def temporary_named(cls, identifier: str) -> Folder:
        """Create ``<temporary folder>/<identifier>/<timestamp>``."""
        return cls.user_temporary_folder().create_unique_dated_subfolder(identifier)

    def create_unique_file(
        self, prefix: str | None = None, extension: str = "", create: bool = False
    ) -> File:
        """A file named ``<prefix>_<token>[.<extension>]`` unused in this folder.

        This folder is created first if needed.

        Raises:
            CouldNotGenerateUniqueNameError: If no free name was found.
        """
        self.actualize()
        unique = unique_name_in_folder(self.path, prefix, extension)
        return File(unique).actualize(create=create)

    def create_unique_subfolder(
        self, prefix: str | None = None, extension: str = "", create: bool = False
    ) -> Folder:
        """A subfolder named ``<prefix>_<token>[.<extension>]`` unused in this folder."""
        self.actualize()
        unique = unique_name_in_folder(self.path, prefix, extension)
        return Folder(unique).actualize(create=create)

    def create_unique_dated_subfolder(self, identifier: str) -> Folder:
        """Create ``<this folder>/<identifier>/<timestamp>``."""
        _check_child_name(identifier)
        return Folder(os.path.join(self.path, identifier, dated_name())).actualize(create=True)

    # Children

    def _require_not_file(self) -> None:
        if self.is_file:
            raise FileExistsAtPathError(self.path)

    def subfolder(self, *names: str, create: bool = False) -> Folder:
        """A folder below this one, e.g. ``root.subfolder("lvl1", "item2")``.

        Raises:
            ValueError: If no name is given, or a name is empty, "." or
                "..", or contains a path separator.
            FileExistsAtPathError: If this folder's path is a file, or a
                file exists at the subfolder path.
        """
        if not names:
            raise ValueError("At least one subfolder name is required")
        for child in names:
            _check_child_name(child)
        self._require_not_file()
        return Folder.create(os.path.join(self.path, *names)).actualize(create=create)

    def subfolder_path(self, components: Iterable[str], create: bool = False) -> Folder:
        """A folder below this one from a sequence of path components."""
        return self.subfolder(*components, create=create)

    def file(self, name: str, create: bool = False) -> File:
        """A file in this folder, which may or may not exist.

        Raises:
            FileExistsAtPathError: If this folder's path is a file.
            FolderExistsAtPathError: If a folder exists at the file path.
        """
        _check_child_name(name)
        self._require_not_file()
        return File.create(os.path.join(self.path, name)).actualize(create=create)

    def item(self, name: str) -> File | Folder:
        """The existing file or folder with this name.

        Raises:
            FileOrFolderDoesNotExistError: If nothing has that name.
        """
        _check_child_name(name)
        self._require_not_file()
        child = os.path.join(self.path, name)
        state = _file_manager().classify(child)
        if state == PathState.FILE:
            return File(child)
        if state == PathState.FOLDER:
            return Folder(child)
        raise FileOrFolderDoesNotExistError(child)

    def contains(self, name: str) -> bool:
        """Does an entry with this name exist in the folder?"""
        _check_child_name(name)
        return _file_manager().classify(os.path.join(self.path, name)) != PathState.UNKNOWN

    def contains_file(self, name: str) -> bool:
        _check_child_name(name)
        return _file_manager().classify(os.path.join(self.path, name)) == PathState.FILE

    def contains_folder(self, name: str) -> bool:
        _check_child_name(name)
        return _file_manager().classify(os.path.join(self.path, name)) == PathState.FOLDER

    def write_data_to_file(self, name: str, data: bytes) -> File:
        """Write data to a named file, creating this folder if needed.

        Existing content is replaced.
        """
        self.actualize()
        target = self.file(name)
        with _os_failure("write", target.path):
            _file_manager().write_bytes(target.path, data)
        return target

    # Content

    def is_empty(self) -> bool:
        """Is the folder empty? Hidden entries count.

        Raises:
            OSError: If the folder doesn't exist or can't be read.
        """
        with _file_manager().scan_directory(self.path) as entries:
            return next(iter(entries), None) is None

    def enumerate_content(
        self,
        visit: Visitor,
        shallow: bool = True,
        include_hidden: bool = False,
        recurse_into_packages: bool = False,
    ) -> None:
        """Call visit for each entry; return False from visit to stop.

        Symlinks and alias files are not followed.
        """
        enumeration.enumerate_content(
            self.path, visit, shallow, include_hidden, recurse_into_packages
        )

    def all_content(
        self,
        shallow: bool = True,
        include_hidden: bool = False,
        recurse_into_packages: bool = False,
        predicate: PathFilter | None = None,
    ) -> list[File | Folder]:
        """Files and folders in enumeration order."""
        return enumeration.all_content(
            self.path, shallow, include_hidden, recurse_into_packages, predicate=predicate
        )

    def all_files(
        self,
        shallow: bool = True,
        include_hidden: bool = False,
        recurse_into_packages: bool = False,
        predicate: PathFilter | None = None,
    ) -> list[File]:
        """Files only, in enumeration order."""
        found = enumeration.all_content(
            self.path, shallow, include_hidden, recurse_into_packages, PathState.FILE, predicate
        )
        return [item for item in found if isinstance(item, File)]

    def all_subfolders(
        self,
        shallow: bool = True,
        include_hidden: bool = False,
        recurse_into_packages: bool = False,
        predicate: PathFilter | None = None,
    ) -> list[Folder]:
        """Folders only, in enumeration order."""
        found = enumeration.all_content(
            self.path, shallow, include_hidden, recurse_into_packages, PathState.FOLDER, predicate
        )
        return [item for item in found if isinstance(item, Folder)]

    # Well-known folders

    @classmethod
    def user_home_folder(cls) -> Folder:
        return cls(search_paths.home_directory())

    @classmethod
    def current(cls) -> Folder:
        """The process's current working directory."""
        return cls(os.getcwd())

    @classmethod
    def user_temporary_folder(cls) -> Folder:
        return cls(search_paths.temporary_directory())

    @classmethod
    def user_search_paths(cls, kind: SearchPathDirectory) -> list[Folder]:
        """All candidate folders for a well-known user folder."""
        return [cls(path) for path in search_paths.user_search_paths(kind)]

    @classmethod
    def user_search_path(cls, kind: SearchPathDirectory) -> Folder:
        """The first candidate folder for a well-known user folder.

        Raises:
            CouldNotLocateSearchPathError: If there is no candidate.
        """
        candidates = cls.user_search_paths(kind)
        if not candidates:
            raise CouldNotLocateSearchPathError(kind.value)
        return candidates[0]

    @classmethod
    def user_documents_folder(cls) -> Folder:
        return cls.user_search_path(SearchPathDirectory.DOCUMENTS)

    @classmethod
    def user_desktop_folder(cls) -> Folder:
        return cls.user_search_path(SearchPathDirectory.DESKTOP)

    @classmethod
    def user_downloads_folder(cls) -> Folder:
        return cls.user_search_path(SearchPathDirectory.DOWNLOADS)

    @classmethod
    def user_caches_folder(cls) -> Folder:
        return cls.user_search_path(SearchPathDirectory.CACHES)

    @classmethod
    def user_library_folder(cls) -> Folder:
        return cls.user_search_path(SearchPathDirectory.LIBRARY)

    @classmethod
    def user_trash_folder(cls) -> Folder:
        return cls.user_search_path(SearchPathDirectory.TRASH)
