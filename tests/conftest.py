"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from locus_fs.config import LocationSettings
from locus_fs.context import LocationContext, set_context, use_context
from locus_fs.filesystem import RealFileManager
from locus_fs.location import Folder
from locus_fs.state import PathState


@pytest.fixture(autouse=True)
def reset_context() -> Iterator[None]:
    """Start and finish every test with the default context."""
    set_context(None)
    yield
    set_context(None)


@pytest.fixture
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Override home directory for testing."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    for variable in ("XDG_CONFIG_HOME", "XDG_CACHE_HOME", "XDG_DATA_HOME"):
        monkeypatch.delenv(variable, raising=False)
    return home


@pytest.fixture
def root(tmp_path: Path) -> Folder:
    """An existing folder to work in."""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return Folder(str(workspace))


@pytest.fixture
def other_root(tmp_path: Path) -> Folder:
    """A second existing folder, for move/copy destinations."""
    workspace = tmp_path / "other"
    workspace.mkdir()
    return Folder(str(workspace))


# ============================================================================
# Mock FileManager Fixtures
# ============================================================================


@pytest.fixture
def mock_file_manager() -> MagicMock:
    """Create a mock FileManager for testing.

    The mock reports every path as missing and records all calls without
    touching real files.
    """
    fm = MagicMock()
    fm.classify.return_value = PathState.UNKNOWN
    fm.attributes_of_item.side_effect = FileNotFoundError
    fm.trash_item.return_value = None
    fm.lexists.return_value = False
    fm.is_symlink.return_value = False
    return fm


@pytest.fixture
def spy_file_manager() -> MagicMock:
    """A MagicMock wrapping the real file manager, to observe OS calls."""
    return MagicMock(wraps=RealFileManager())


@pytest.fixture
def spy_context(spy_file_manager: MagicMock) -> Iterator[MagicMock]:
    """Activate a context whose file manager is the spy."""
    context = LocationContext(file_manager=spy_file_manager, settings=LocationSettings())
    with use_context(context):
        yield spy_file_manager
