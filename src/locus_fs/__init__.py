"""Typed file and folder locations over the OS filesystem."""

__version__ = "0.1.0"

# Export the public value types, protocols and errors
from locus_fs.config import LocationSettings
from locus_fs.context import LocationContext, create_context, get_context, use_context
from locus_fs.errors import (
    CouldNotCreateFileError,
    CouldNotGenerateUniqueNameError,
    CouldNotLocateSearchPathError,
    DestinationExistsAtPathError,
    DestinationFolderDoesNotExistError,
    FileExistsAtPathError,
    FileOrFolderDoesNotExistError,
    FolderExistsAtPathError,
    LocationError,
    UnknownLocationError,
)
from locus_fs.location import File, Folder
from locus_fs.protocols import FileManager, Location
from locus_fs.query import LocationQuery
from locus_fs.state import PathState, classify
from locus_fs.types import AttributeKey, SearchItem, SearchPathDirectory

__all__ = [
    "__version__",
    "AttributeKey",
    "CouldNotCreateFileError",
    "CouldNotGenerateUniqueNameError",
    "CouldNotLocateSearchPathError",
    "DestinationExistsAtPathError",
    "DestinationFolderDoesNotExistError",
    "File",
    "FileExistsAtPathError",
    "FileManager",
    "FileOrFolderDoesNotExistError",
    "Folder",
    "FolderExistsAtPathError",
    "Location",
    "LocationContext",
    "LocationError",
    "LocationQuery",
    "LocationSettings",
    "PathState",
    "SearchItem",
    "SearchPathDirectory",
    "UnknownLocationError",
    "classify",
    "create_context",
    "get_context",
    "use_context",
]
