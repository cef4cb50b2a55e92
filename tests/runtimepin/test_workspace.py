"""
Tests for the Workspace scoped directory.
"""

import pytest

from runtimepin.runtime_dependency_downloader import Workspace
from runtimepin.runtimepin_exceptions import IntegrityMismatch, WorkspaceUnavailable


class TestWorkspace:
    def test_directory_exists_only_inside_scope(self, tmp_path, logger):
        with Workspace(tmp_path, logger) as path:
            assert path.is_dir()
            assert path.parent == tmp_path
            assert path.name.startswith(Workspace.PREFIX)
            (path / "nested").mkdir()
            (path / "nested" / "file").write_text("data")

        assert not path.exists()

    def test_released_on_error(self, tmp_path, logger):
        with pytest.raises(IntegrityMismatch):
            with Workspace(tmp_path, logger) as path:
                raise IntegrityMismatch("a.tar.xz", "0" * 64, "1" * 64)

        assert not path.exists()

    def test_released_on_keyboard_interrupt(self, tmp_path, logger):
        with pytest.raises(KeyboardInterrupt):
            with Workspace(tmp_path, logger) as path:
                raise KeyboardInterrupt()

        assert not path.exists()

    def test_release_is_idempotent(self, tmp_path, logger):
        workspace = Workspace(tmp_path, logger)
        path = workspace.acquire()

        workspace.release()
        path.mkdir()
        workspace.release()

        assert path.exists()

    def test_runs_get_distinct_directories(self, tmp_path, logger):
        with Workspace(tmp_path, logger) as first, Workspace(tmp_path, logger) as second:
            assert first != second

    def test_parent_is_created(self, tmp_path, logger):
        with Workspace(tmp_path / "missing" / "parent", logger) as path:
            assert path.is_dir()

    def test_cannot_be_acquired_twice(self, tmp_path, logger):
        workspace = Workspace(tmp_path, logger)
        workspace.acquire()
        try:
            with pytest.raises(RuntimeError):
                workspace.acquire()
        finally:
            workspace.release()

    def test_parent_below_regular_file_is_unavailable(self, tmp_path, logger):
        """A parent that cannot be created fails with WorkspaceUnavailable, chained to the OSError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        workspace = Workspace(blocker / "ws", logger)

        with pytest.raises(WorkspaceUnavailable) as exc_info:
            workspace.acquire()

        assert isinstance(exc_info.value.__cause__, OSError)
        assert workspace.path is None
        workspace.release()
