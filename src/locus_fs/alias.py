"""Bookmark-style alias files.

An alias is a small JSON document naming its target by absolute path.
Unlike a symbolic link it is an ordinary file, so an alias to a folder
classifies as a FILE until it is resolved.
"""

from __future__ import annotations

import os
import stat
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from locus_fs.context import LocationContext

ALIAS_KIND = "locus-fs-alias"
ALIAS_VERSION = 1


class AliasRecord(BaseModel):
    """Contents of an alias file."""

    model_config = ConfigDict(populate_by_name=True)

    kind: Literal["locus-fs-alias"]
    version: int = ALIAS_VERSION
    target: str
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="createdAt"
    )

    def to_bytes(self) -> bytes:
        """Serialize for writing to disk."""
        return self.model_dump_json(by_alias=True, indent=2).encode()


def read_alias(path: str, context: LocationContext) -> AliasRecord | None:
    """Parse path as an alias file.

    Returns None for anything that is not a regular, non-symlink file
    holding a valid alias record. Symlinks are never treated as aliases.
    """
    try:
        st = os.lstat(path)
    except OSError:
        return None
    if not stat.S_ISREG(st.st_mode) or st.st_size > context.settings.alias_max_bytes:
        return None

    try:
        data = context.file_manager.read_bytes(path, context.settings.alias_max_bytes)
    except OSError:
        return None
    try:
        return AliasRecord.model_validate_json(data)
    except ValidationError:
        return None


def write_alias(target: str, destination: str, context: LocationContext) -> AliasRecord:
    """Write an alias file at destination pointing at target."""
    record = AliasRecord(kind=ALIAS_KIND, target=target)
    context.file_manager.create_file(destination, record.to_bytes())
    return record
