import pytest

from codesandbox.core.errors import WorkspaceError
from codesandbox.services.storage import WorkspaceManager


def test_create_is_unique_per_call(tmp_path):
    wm = WorkspaceManager(tmp_path)
    a = wm.create("sub-1")
    b = wm.create("sub-1")
    assert a.path != b.path
    assert a.path.is_dir() and b.path.is_dir()
    assert a.path.name.endswith("-sub-1")
    assert a.owner_submission_id == "sub-1"


def test_destroy_removes_tree_and_tolerates_missing(tmp_path):
    wm = WorkspaceManager(tmp_path)
    ws = wm.create("x")
    (ws.path / "nested").mkdir()
    (ws.path / "nested" / "f.txt").write_text("data")
    wm.destroy(ws.path)
    assert not ws.path.exists()
    wm.destroy(ws.path)  # already gone


def test_scoped_cleans_up_on_exception(tmp_path):
    wm = WorkspaceManager(tmp_path)
    seen = []
    with pytest.raises(RuntimeError):
        with wm.scoped("boom") as ws:
            seen.append(ws.path)
            (ws.path / "solution.py").write_text("print(1)")
            raise RuntimeError("fail inside")
    assert seen and not seen[0].exists()
    assert list(tmp_path.iterdir()) == []


def test_scoped_swallows_destroy_failure(tmp_path):
    class Stubborn(WorkspaceManager):
        def destroy(self, path):
            raise WorkspaceError("read-only fs")

    wm = Stubborn(tmp_path)
    with wm.scoped("s") as ws:
        value = 42
    assert value == 42
    assert ws.path.exists()


def test_create_failure_raises_workspace_error(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("not a dir")
    wm = WorkspaceManager(blocker)
    with pytest.raises(WorkspaceError):
        wm.create("x")
