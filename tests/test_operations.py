"""Tests for move, copy, rename, delete, symlink, alias and trash operations."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from locus_fs.context import LocationContext, use_context
from locus_fs.errors import (
    DestinationExistsAtPathError,
    DestinationFolderDoesNotExistError,
    FileOrFolderDoesNotExistError,
    UnknownLocationError,
)
from locus_fs.location import File, Folder
from locus_fs.state import PathState


def _write(folder: Folder, name: str, text: str) -> File:
    file = folder.file(name)
    Path(file.path).write_text(text)
    return file


class TestMove:
    """Tests for move()."""

    def test_move_file(self, root: Folder, other_root: Folder) -> None:
        """Test a moved file keeps its content and the original goes stale."""
        file = root.create_unique_file()
        Path(file.path).write_text("This is a test")
        assert file.is_file

        moved = file.move(other_root)

        assert not file.exists
        assert moved.is_file
        assert isinstance(moved, File)
        assert moved.path == os.path.join(other_root.path, file.basename)
        assert Path(moved.path).read_text() == "This is a test"

    def test_move_folder(self, root: Folder, other_root: Folder) -> None:
        """Test moving a folder moves its contents."""
        subfolder = root.create_unique_subfolder(prefix="orig", create=True)
        file = subfolder.create_unique_file(prefix="origfile")
        Path(file.path).write_text("This is a test")

        moved = subfolder.move(other_root)

        assert not subfolder.exists
        assert isinstance(moved, Folder)
        assert moved.is_folder
        assert moved.basename == subfolder.basename
        assert moved.contains_file(file.basename)
        assert Path(moved.file(file.basename).path).read_text() == "This is a test"

    def test_move_missing_source(self, root: Folder, other_root: Folder) -> None:
        """Test moving something that doesn't exist fails before any OS call."""
        missing = File(os.path.join(root.path, "missing"))

        with pytest.raises(FileOrFolderDoesNotExistError):
            missing.move(other_root)

    def test_move_into_missing_folder(self, root: Folder) -> None:
        """Test the destination folder must exist."""
        file = root.file("a.txt", create=True)
        target = Folder(os.path.join(root.path, "nowhere"))

        with pytest.raises(DestinationFolderDoesNotExistError) as exc_info:
            file.move(target)

        assert exc_info.value.path == target.path
        assert file.exists

    def test_move_into_file(self, root: Folder) -> None:
        """Test a file is not a valid destination folder."""
        file = root.file("a.txt", create=True)
        not_a_folder = root.file("b.txt", create=True)

        with pytest.raises(DestinationFolderDoesNotExistError):
            file.move(Folder(not_a_folder.path))

    def test_move_collision(
        self, root: Folder, other_root: Folder, spy_context: MagicMock
    ) -> None:
        """Test an existing entry at the destination blocks the move."""
        file = _write(root, "same.txt", "source")
        _write(other_root, "same.txt", "destination")

        with pytest.raises(DestinationExistsAtPathError):
            file.move(other_root)

        spy_context.move_item.assert_not_called()
        assert Path(file.path).read_text() == "source"

    def test_move_os_failure_is_wrapped(
        self, root: Folder, other_root: Folder, spy_context: MagicMock
    ) -> None:
        """Test an OS failure during the move becomes UnknownLocationError."""
        spy_context.move_item.side_effect = OSError(28, "No space left on device")
        file = root.file("a.txt", create=True)

        with pytest.raises(UnknownLocationError) as exc_info:
            file.move(other_root)

        assert "No space left" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, OSError)


class TestCopy:
    """Tests for copy()."""

    def test_copy_file(self, root: Folder, other_root: Folder) -> None:
        """Test the source survives and the copy has the same content."""
        file = _write(root, "a.txt", "This is a test")

        copied = file.copy(other_root)

        assert file.exists
        assert copied.is_file
        assert Path(copied.path).read_bytes() == Path(file.path).read_bytes()

    def test_copy_folder_is_recursive(self, root: Folder, other_root: Folder) -> None:
        """Test folders are copied with their contents."""
        subfolder = root.create_unique_subfolder(prefix="orig", create=True)
        file = _write(subfolder, "inner.txt", "This is a test")
        assert file.file_size == 14

        copied = subfolder.copy(other_root)

        assert subfolder.exists
        assert isinstance(copied, Folder)
        assert copied.contains_file("inner.txt")
        assert copied.file("inner.txt").file_size == 14

    def test_copy_collision(self, root: Folder, other_root: Folder) -> None:
        """Test copying onto an existing name fails."""
        file = _write(root, "same.txt", "source")
        other_root.subfolder("same.txt", create=True)

        with pytest.raises(DestinationExistsAtPathError):
            file.copy(other_root)

    def test_copy_missing_source(self, root: Folder, other_root: Folder) -> None:
        """Test copying a missing item fails."""
        with pytest.raises(FileOrFolderDoesNotExistError):
            Folder(os.path.join(root.path, "missing")).copy(other_root)


class TestRename:
    """Tests for rename()."""

    def test_rename_file(self, root: Folder) -> None:
        """Test a renamed file keeps its folder and content."""
        file = _write(root, "old.txt", "content")

        renamed = file.rename("new.txt")

        assert renamed == File(os.path.join(root.path, "new.txt"))
        assert renamed.parent == root
        assert not file.exists
        assert Path(renamed.path).read_text() == "content"

    def test_rename_folder(self, root: Folder) -> None:
        """Test renaming a folder returns a Folder."""
        folder = root.subfolder("before", create=True)

        renamed = folder.rename("after")

        assert isinstance(renamed, Folder)
        assert renamed.is_folder
        assert root.contains_folder("after")

    def test_rename_collision_leaves_source(self, root: Folder, spy_context: MagicMock) -> None:
        """Test renaming onto an existing sibling fails without an OS call."""
        file = _write(root, "a.txt", "a")
        _write(root, "b.txt", "b")

        with pytest.raises(DestinationExistsAtPathError) as exc_info:
            file.rename("b.txt")

        assert exc_info.value.path == os.path.join(root.path, "b.txt")
        spy_context.move_item.assert_not_called()
        assert Path(file.path).read_text() == "a"

    def test_rename_onto_dangling_symlink(self, root: Folder) -> None:
        """Test a dangling link counts as an occupied name."""
        file = root.file("a.txt", create=True)
        os.symlink(os.path.join(root.path, "nowhere"), os.path.join(root.path, "link"))

        with pytest.raises(DestinationExistsAtPathError):
            file.rename("link")

    def test_rename_checks_links_through_file_manager(self, mock_file_manager: MagicMock) -> None:
        """Test the occupied-name check asks the file manager about dangling links."""
        mock_file_manager.classify.side_effect = (
            lambda path: PathState.FILE if path == "/work/a.txt" else PathState.UNKNOWN
        )
        mock_file_manager.lexists.return_value = True

        with use_context(LocationContext(file_manager=mock_file_manager)):
            with pytest.raises(DestinationExistsAtPathError):
                File("/work/a.txt").rename("link")

        mock_file_manager.lexists.assert_called_with("/work/link")
        mock_file_manager.move_item.assert_not_called()

    @pytest.mark.parametrize("bad_name", ["", "a/b", ".", ".."])
    def test_rename_invalid_name(self, root: Folder, bad_name: str) -> None:
        """Test names that are empty or contain a separator are rejected."""
        file = root.file("a.txt", create=True)

        with pytest.raises(ValueError):
            file.rename(bad_name)

    def test_rename_missing_source(self, root: Folder) -> None:
        """Test renaming a missing item fails."""
        with pytest.raises(FileOrFolderDoesNotExistError):
            File(os.path.join(root.path, "missing")).rename("other")


class TestDelete:
    """Tests for delete()."""

    def test_delete_file(self, root: Folder) -> None:
        """Test a deleted file no longer exists."""
        file = root.file("a.txt", create=True)
        file.delete()
        assert file.does_not_exist

    def test_delete_folder_recursively(self, root: Folder) -> None:
        """Test deleting a folder removes its contents."""
        folder = root.subfolder("one", "two", "three", create=True)
        folder.file("leaf.txt", create=True)

        top = root.subfolder("one")
        top.delete()

        assert top.does_not_exist
        assert root.is_empty()

    def test_delete_missing_propagates_os_error(self, root: Folder) -> None:
        """Test there is no pre-check: the OS error comes through unchanged."""
        with pytest.raises(FileNotFoundError):
            File(os.path.join(root.path, "missing")).delete()


class TestSymlinks:
    """Tests for create_symlink() and resolving_symlinks()."""

    def test_is_symlink_asks_file_manager(self, mock_file_manager: MagicMock) -> None:
        """Test link detection goes through the active file manager."""
        mock_file_manager.is_symlink.return_value = True

        with use_context(LocationContext(file_manager=mock_file_manager)):
            assert File("/work/link").is_symlink

        mock_file_manager.is_symlink.assert_called_once_with("/work/link")

    def test_create_symlink_to_file(self, root: Folder) -> None:
        """Test a symlink to a file is a File."""
        file = _write(root, "target.txt", "linked")

        link = file.create_symlink(os.path.join(root.path, "link.txt"))

        assert isinstance(link, File)
        assert link.is_symlink
        assert not file.is_symlink
        assert link.is_file
        assert Path(link.path).read_text() == "linked"

    def test_create_symlink_to_folder(self, root: Folder, other_root: Folder) -> None:
        """Test a symlink to a folder is a Folder and resolves back."""
        target = root.subfolder("target", create=True)

        link = target.create_symlink(Folder(os.path.join(other_root.path, "link")))

        assert isinstance(link, Folder)
        assert link.is_folder
        assert link.resolving_symlinks() == Folder(os.path.realpath(target.path))

    def test_create_symlink_missing_source(self, root: Folder) -> None:
        """Test the source must exist."""
        with pytest.raises(FileOrFolderDoesNotExistError):
            File(os.path.join(root.path, "missing")).create_symlink(os.path.join(root.path, "l"))

    def test_create_symlink_destination_exists(self, root: Folder) -> None:
        """Test the destination must not exist in any state."""
        file = root.file("a.txt", create=True)
        occupied = root.subfolder("occupied", create=True)

        with pytest.raises(DestinationExistsAtPathError):
            file.create_symlink(occupied)

    def test_resolving_symlinks_keeps_variant(self, root: Folder) -> None:
        """Test resolution does not re-check the variant."""
        folder = root.subfolder("real", create=True)
        link = os.path.join(root.path, "link")
        os.symlink(folder.path, link)

        resolved = File(link).resolving_symlinks()

        assert isinstance(resolved, File)
        assert resolved.path == os.path.realpath(folder.path)


class TestAliases:
    """Tests for alias files."""

    def test_alias_to_file(self, root: Folder) -> None:
        """Test an alias resolves to the file it refers to."""
        target = _write(root, "target.txt", "data")

        alias = target.create_alias(os.path.join(root.path, "target alias"))

        assert alias.is_alias
        assert alias.is_file
        assert not target.is_alias
        assert alias.resolving_alias() == target

    def test_alias_to_folder_presents_as_file(self, root: Folder) -> None:
        """Test an alias to a folder is a File until resolved."""
        target = root.subfolder("target", create=True)

        alias = target.create_alias(File(os.path.join(root.path, "folder alias")))

        assert isinstance(alias, File)
        assert alias.is_file
        assert alias.state == PathState.FILE
        resolved = alias.resolving_alias()
        assert isinstance(resolved, Folder)
        assert resolved == target

    def test_resolving_non_alias_returns_self(self, root: Folder) -> None:
        """Test ordinary files resolve to themselves."""
        file = _write(root, "plain.json", '{"target": "/tmp"}')
        assert file.resolving_alias() is file

    def test_alias_target_gone(self, root: Folder) -> None:
        """Test resolving an alias whose target was deleted fails."""
        target = root.file("target.txt", create=True)
        alias = target.create_alias(os.path.join(root.path, "alias"))
        target.delete()

        with pytest.raises(FileOrFolderDoesNotExistError) as exc_info:
            alias.resolving_alias()

        assert exc_info.value.path == target.path

    def test_alias_missing_source(self, root: Folder) -> None:
        """Test the alias source must exist."""
        with pytest.raises(FileOrFolderDoesNotExistError):
            File(os.path.join(root.path, "missing")).create_alias(os.path.join(root.path, "a"))

    def test_alias_destination_exists(self, root: Folder) -> None:
        """Test the alias destination must not exist."""
        target = root.file("target.txt", create=True)
        existing = root.file("existing", create=True)

        with pytest.raises(DestinationExistsAtPathError):
            target.create_alias(existing)

    def test_symlink_is_not_alias(self, root: Folder) -> None:
        """Test a symlink to an alias file is not itself an alias."""
        target = root.file("target.txt", create=True)
        alias = target.create_alias(os.path.join(root.path, "alias"))
        link = alias.create_symlink(os.path.join(root.path, "link"))

        assert not link.is_alias


class TestTrash:
    """Tests for move_to_trash() with a mocked file manager."""

    def test_trash_reports_location(self, root: Folder) -> None:
        """Test the trashed location is returned with the same variant."""
        fm = MagicMock()
        fm.classify.return_value = PathState.FOLDER
        fm.trash_item.return_value = "/trash/files/work"

        with use_context(LocationContext(file_manager=fm)):
            trashed = root.move_to_trash()

        fm.trash_item.assert_called_once_with(root.path)
        assert trashed == Folder("/trash/files/work")

    def test_trash_unknown_location(self, root: Folder) -> None:
        """Test None is returned when the platform doesn't report a location."""
        fm = MagicMock()
        fm.classify.return_value = PathState.FILE
        fm.trash_item.return_value = None

        with use_context(LocationContext(file_manager=fm)):
            assert File(os.path.join(root.path, "f")).move_to_trash() is None

    def test_trash_missing(self, mock_file_manager: MagicMock) -> None:
        """Test trashing a missing item fails before calling the OS."""
        with use_context(LocationContext(file_manager=mock_file_manager)):
            with pytest.raises(FileOrFolderDoesNotExistError):
                File("/missing/item").move_to_trash()

        mock_file_manager.trash_item.assert_not_called()

    def test_trash_failure_is_wrapped(self, root: Folder) -> None:
        """Test an OS error from the trash becomes UnknownLocationError."""
        fm = MagicMock()
        fm.classify.return_value = PathState.FOLDER
        fm.trash_item.side_effect = PermissionError("no trash")

        with use_context(LocationContext(file_manager=fm)):
            with pytest.raises(UnknownLocationError):
                root.move_to_trash()
