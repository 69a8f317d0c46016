"""Shared data types for locus-fs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

__all__ = [
    "AttributeKey",
    "SETTABLE_ATTRIBUTES",
    "SearchItem",
    "SearchPathDirectory",
    "settable_attributes",
]


class AttributeKey(str, Enum):
    """Keys of a location's attribute snapshot."""

    TYPE = "type"
    SIZE = "size"
    CREATION_DATE = "creation_date"
    MODIFICATION_DATE = "modification_date"
    POSIX_PERMISSIONS = "posix_permissions"
    OWNER_ID = "owner_id"
    GROUP_ID = "group_id"
    REFERENCE_COUNT = "reference_count"
    IMMUTABLE = "immutable"


# Keys accepted by set_attributes() and actualize()
SETTABLE_ATTRIBUTES = frozenset(
    {AttributeKey.POSIX_PERMISSIONS, AttributeKey.MODIFICATION_DATE, AttributeKey.IMMUTABLE}
)


def settable_attributes(values: Mapping[Any, Any]) -> dict[AttributeKey, Any]:
    """Coerce keys to AttributeKey and reject the read-only ones.

    Raises:
        ValueError: If a key is unknown or cannot be set.
    """
    coerced = {AttributeKey(key): value for key, value in values.items()}
    readonly = set(coerced) - SETTABLE_ATTRIBUTES
    if readonly:
        names = ", ".join(sorted(key.value for key in readonly))
        raise ValueError(f"Attributes cannot be set: {names}")
    return coerced


class SearchPathDirectory(str, Enum):
    """Well-known per-user folders."""

    DOCUMENTS = "documents"
    DESKTOP = "desktop"
    DOWNLOADS = "downloads"
    CACHES = "caches"
    LIBRARY = "library"
    TRASH = "trash"


@dataclass(frozen=True)
class SearchItem:
    """A single result of a LocationQuery.

    Attributes:
        path: Absolute path of the matching entry.
        base_name: Filesystem name, including any extension.
        display_name: User-facing name (name without extension for files).
        file_size: Size in bytes, None for folders.
        content_type: MIME type guess, None when unknown.
        kind: "file" or "folder".
    """

    path: str
    base_name: str
    display_name: str
    file_size: int | None
    content_type: str | None
    kind: str

    def __post_init__(self) -> None:
        """Validate invariants."""
        if not self.path:
            raise ValueError("path cannot be empty")
        if self.kind not in ("file", "folder"):
            raise ValueError(f"kind must be 'file' or 'folder', got {self.kind!r}")

    @property
    def file_path(self) -> Path:
        """The result as a pathlib Path."""
        return Path(self.path)
