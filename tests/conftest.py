import shutil
import sys

import pytest
import requests

from codesandbox.runners.framework import StaticValidator
from codesandbox.services.execution_service import ExecutionService
from codesandbox.services.storage import WorkspaceManager
from codesandbox.settings import Settings

needs_node = pytest.mark.skipif(shutil.which("node") is None, reason="node not installed")
needs_gxx = pytest.mark.skipif(shutil.which("g++") is None, reason="g++ not installed")
needs_javac = pytest.mark.skipif(
    shutil.which("javac") is None or shutil.which("java") is None, reason="JDK not installed"
)


class CountingWorkspaceManager(WorkspaceManager):
    """Records every path handed out, and which ones are live."""

    def __init__(self, root):
        super().__init__(root)
        self.created = []
        self.live = set()
        self.peak_live = 0
        self.duplicates = 0

    def create(self, submission_id):
        ws = super().create(submission_id)
        if ws.path in self.live:
            self.duplicates += 1
        self.created.append(ws.path)
        self.live.add(ws.path)
        self.peak_live = max(self.peak_live, len(self.live))
        return ws

    def destroy(self, path):
        super().destroy(path)
        self.live.discard(path)


class FakeResponse:
    def __init__(self, payload=None, status=200):
        self.payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class FakeSession:
    """Stands in for requests.Session; answers every POST with one response or error."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append((url, json, timeout))
        if self.error is not None:
            raise self.error
        return self.response


class RecordingSleep:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        workspace_root=tmp_path / "ws",
        execution_timeout_ms=10_000,
        compile_timeout_ms=30_000,
        max_concurrency=4,
        runtimes={"python": sys.executable},
        evaluator="none",
    )


@pytest.fixture
def workspaces(settings):
    return CountingWorkspaceManager(settings.workspace_root)


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def service(settings, workspaces, sleeper):
    return ExecutionService(settings, workspaces=workspaces, validator=StaticValidator(sleep=sleeper))
