from __future__ import annotations
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import structlog

from ..core.errors import WorkspaceError
from ..core.models import Workspace
from ..core.utils import new_token

log = structlog.get_logger(__name__)


class WorkspaceManager:
    """
    One ephemeral directory per submission:
      <root>/<token>-<submission_id>/
        ├─ solution.<ext>   (submitted code)
        ├─ test_<n>.<ext>   (test-case harnesses, if any)
        └─ build artifacts  (class files, binaries)
    Everything under it is removed before the result is returned.
    """

    def __init__(self, root: Path):
        self.root = root if root.is_absolute() else root.resolve()

    def create(self, submission_id: str) -> Workspace:
        path = self.root / f"{new_token()}-{submission_id}"
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            # exist_ok=False: a collision must fail loudly, never share
            path.mkdir(parents=False, exist_ok=False)
        except OSError as e:
            raise WorkspaceError(f"cannot create workspace {path}: {e}") from e
        return Workspace(path=path, owner_submission_id=submission_id)

    def destroy(self, path: Path) -> None:
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            return
        except OSError as e:
            raise WorkspaceError(f"cannot remove workspace {path}: {e}") from e

    @contextmanager
    def scoped(self, submission_id: str) -> Iterator[Workspace]:
        ws = self.create(submission_id)
        try:
            yield ws
        finally:
            try:
                self.destroy(ws.path)
            except WorkspaceError as e:
                log.warning("workspace.destroy_failed", path=str(ws.path), error=str(e))
