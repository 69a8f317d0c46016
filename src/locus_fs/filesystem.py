"""OS filesystem primitives.

RealFileManager is the production FileManager. It wraps os, shutil and
send2trash and performs no validation beyond what the OS enforces.
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
from collections.abc import Iterator, Mapping
from contextlib import AbstractContextManager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any
from urllib.parse import unquote

from send2trash import send2trash

from locus_fs.search_paths import user_search_paths
from locus_fs.state import PathState, classify
from locus_fs.types import AttributeKey, SearchPathDirectory, settable_attributes

logger = logging.getLogger(__name__)

_WRITE_BITS = stat.S_IWUSR | stat.S_IWGRP | stat.S_IWOTH


def supports_file_flags() -> bool:
    """Check whether the platform exposes BSD file flags (chflags)."""
    return hasattr(os, "chflags") and hasattr(stat, "UF_IMMUTABLE")


def _timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


def _entry_type(mode: int) -> str:
    if stat.S_ISDIR(mode):
        return "folder"
    if stat.S_ISREG(mode):
        return "file"
    if stat.S_ISLNK(mode):
        return "symlink"
    return "other"


def _is_immutable(st: os.stat_result) -> bool:
    if supports_file_flags() and hasattr(st, "st_flags"):
        return bool(st.st_flags & stat.UF_IMMUTABLE)
    return not st.st_mode & _WRITE_BITS


def _locate_trashed(original: str) -> str | None:
    """Find where an item trashed from original ended up.

    Reads the freedesktop.org trash info records, picking the newest one
    whose Path matches. On macOS the item is looked up by name in ~/.Trash.
    """
    trash = Path(user_search_paths(SearchPathDirectory.TRASH)[0])
    info_dir = trash / "info"
    if info_dir.is_dir():
        candidates: list[tuple[float, Path]] = []
        for info in info_dir.glob("*.trashinfo"):
            try:
                lines = info.read_text().splitlines()
            except OSError:
                continue
            for line in lines:
                if line.startswith("Path=") and unquote(line[5:]) == original:
                    candidates.append((info.stat().st_mtime, info))
                    break
        if candidates:
            _, newest = max(candidates)
            trashed = trash / "files" / newest.stem
            if os.path.lexists(trashed):
                return str(trashed)

    by_name = trash / os.path.basename(original)
    if os.path.lexists(by_name):
        return str(by_name)
    return None


class RealFileManager:
    """Production filesystem implementation.

    Wraps standard library os/shutil operations and send2trash.
    Satisfies the FileManager protocol structurally.
    """

    def classify(self, path: str) -> PathState:
        """Classify a path as FOLDER, FILE or UNKNOWN."""
        return classify(path)

    def create_file(
        self, path: str, contents: bytes = b"", attributes: Mapping[AttributeKey, Any] | None = None
    ) -> None:
        """Create a file that must not already exist.

        Attribute keys are checked before the file is created. If applying
        them fails, the new file is removed again.
        """
        values = settable_attributes(attributes) if attributes else None
        with open(path, "xb") as handle:
            handle.write(contents)
        if values:
            try:
                self.set_attributes(values, path)
            except OSError:
                os.unlink(path)
                raise

    def create_directory(
        self,
        path: str,
        with_intermediates: bool = True,
        attributes: Mapping[AttributeKey, Any] | None = None,
    ) -> None:
        """Create a directory.

        Attribute keys are checked first. If applying them fails, a directory
        created by this call is removed again.
        """
        values = settable_attributes(attributes) if attributes else None
        existed = os.path.isdir(path)
        if with_intermediates:
            os.makedirs(path, exist_ok=True)
        else:
            os.mkdir(path)
        if values:
            try:
                self.set_attributes(values, path)
            except OSError:
                if not existed:
                    os.rmdir(path)
                raise

    def move_item(self, src: str, dst: str) -> None:
        """Move or rename a file or directory."""
        shutil.move(src, dst)

    def copy_item(self, src: str, dst: str) -> None:
        """Copy a file, or a directory recursively. Symlinks are copied as links."""
        if os.path.isdir(src) and not os.path.islink(src):
            shutil.copytree(src, dst, symlinks=True)
        else:
            shutil.copy2(src, dst, follow_symlinks=False)

    def remove_item(self, path: str) -> None:
        """Remove a file, or a directory recursively."""
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.unlink(path)

    def lexists(self, path: str) -> bool:
        """Check whether anything, including a dangling symlink, is at path."""
        return os.path.lexists(path)

    def is_symlink(self, path: str) -> bool:
        """Check whether path is a symbolic link, without following it."""
        return os.path.islink(path)

    def create_symbolic_link(self, path: str, target: str) -> None:
        """Create a symbolic link at path pointing to target."""
        os.symlink(target, path, target_is_directory=os.path.isdir(target))

    def trash_item(self, path: str) -> str | None:
        """Move an item to the user trash."""
        send2trash(path)
        return _locate_trashed(path)

    def attributes_of_item(self, path: str) -> dict[AttributeKey, Any]:
        """Return an attribute snapshot, without following a final symlink."""
        st = os.lstat(path)
        birthtime = getattr(st, "st_birthtime", None)
        return {
            AttributeKey.TYPE: _entry_type(st.st_mode),
            AttributeKey.SIZE: st.st_size,
            AttributeKey.CREATION_DATE: _timestamp(birthtime) if birthtime is not None else None,
            AttributeKey.MODIFICATION_DATE: _timestamp(st.st_mtime),
            AttributeKey.POSIX_PERMISSIONS: stat.S_IMODE(st.st_mode),
            AttributeKey.OWNER_ID: st.st_uid,
            AttributeKey.GROUP_ID: st.st_gid,
            AttributeKey.REFERENCE_COUNT: st.st_nlink,
            AttributeKey.IMMUTABLE: _is_immutable(st),
        }

    def set_attributes(self, values: Mapping[AttributeKey, Any], path: str) -> None:
        """Apply settable attributes to an existing item.

        Raises:
            ValueError: If a key is read-only.
        """
        values = settable_attributes(values)

        immutable = values.get(AttributeKey.IMMUTABLE)
        # An immutable item rejects every other change, so unlock first and lock last
        if immutable is False:
            self._set_immutable(path, False)
        if AttributeKey.POSIX_PERMISSIONS in values:
            os.chmod(path, int(values[AttributeKey.POSIX_PERMISSIONS]))
        if AttributeKey.MODIFICATION_DATE in values:
            modified: datetime = values[AttributeKey.MODIFICATION_DATE]
            os.utime(path, (os.stat(path).st_atime, modified.timestamp()))
        if immutable:
            self._set_immutable(path, True)

    def _set_immutable(self, path: str, flag: bool) -> None:
        st = os.stat(path)
        if supports_file_flags():
            flags = st.st_flags | stat.UF_IMMUTABLE if flag else st.st_flags & ~stat.UF_IMMUTABLE
            os.chflags(path, flags)
        elif flag:
            os.chmod(path, stat.S_IMODE(st.st_mode) & ~_WRITE_BITS)
        else:
            os.chmod(path, stat.S_IMODE(st.st_mode) | stat.S_IWUSR)
        logger.debug("Set immutable=%s on %s", flag, path)

    def scan_directory(self, path: str) -> AbstractContextManager[Iterator[os.DirEntry[str]]]:
        """Open a directory listing, in OS order."""
        return os.scandir(path)

    def read_bytes(self, path: str, limit: int | None = None) -> bytes:
        """Read up to limit bytes from a file."""
        with open(path, "rb") as handle:
            return handle.read() if limit is None else handle.read(limit)

    def write_bytes(self, path: str, data: bytes) -> None:
        """Write data to a file, replacing any content."""
        with open(path, "wb") as handle:
            handle.write(data)
