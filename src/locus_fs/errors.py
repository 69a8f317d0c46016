"""Errors raised by locus-fs.

Every precondition failure detected before touching the filesystem has its
own class. Unexpected OS failures raised while a mutation is in progress are
wrapped in UnknownLocationError, chained to the original OSError.
"""

from __future__ import annotations

__all__ = [
    "CouldNotCreateFileError",
    "CouldNotGenerateUniqueNameError",
    "CouldNotLocateSearchPathError",
    "DestinationExistsAtPathError",
    "DestinationFolderDoesNotExistError",
    "FileExistsAtPathError",
    "FileOrFolderDoesNotExistError",
    "FolderExistsAtPathError",
    "LocationError",
    "UnknownLocationError",
]


class LocationError(Exception):
    """Base class for all locus-fs errors."""

    pass


class _PathError(LocationError):
    """An error concerning a specific filesystem path."""

    message = "Filesystem error"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"{self.message}: {path}")


class FileExistsAtPathError(_PathError):
    """A file exists where a folder was expected."""

    message = "A file exists at path"


class FolderExistsAtPathError(_PathError):
    """A folder exists where a file was expected."""

    message = "A folder exists at path"


class DestinationExistsAtPathError(_PathError):
    """The target path of a mutation is already occupied."""

    message = "Destination already exists"


class FileOrFolderDoesNotExistError(_PathError):
    """The operation requires an existing file or folder."""

    message = "File or folder does not exist"


class DestinationFolderDoesNotExistError(_PathError):
    """A move/copy target folder is missing or is not a folder."""

    message = "Destination folder does not exist"


class CouldNotCreateFileError(_PathError):
    """The OS refused to create a file."""

    message = "Could not create file"


class CouldNotGenerateUniqueNameError(_PathError):
    """Every unique-name candidate collided with an existing entry."""

    message = "Could not generate a unique name in folder"


class CouldNotLocateSearchPathError(LocationError):
    """A well-known user folder lookup returned no candidates."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Could not locate search path: {kind}")


class UnknownLocationError(LocationError):
    """Catch-all for an unexpected OS-level failure."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
