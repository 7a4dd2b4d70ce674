from __future__ import annotations
from typing import Optional

from .models import Phase


class SandboxError(Exception):
    """Base class. `phase` tells the aggregator where the submission stopped."""
    phase: Phase = Phase.SETUP


class UnsupportedLanguageError(SandboxError, ValueError):
    def __init__(self, language: str):
        super().__init__(f"Unsupported language: {language}")
        self.language = language


class WorkspaceError(SandboxError):
    pass


class ProcessFailedError(SandboxError):
    """Child exited non-zero (or could not be spawned)."""
    phase = Phase.RUN

    def __init__(self, message: str, exit_code: Optional[int] = None, stdout: str = ""):
        super().__init__(message)
        self.exit_code = exit_code
        self.stdout = stdout


class CompileError(ProcessFailedError):
    phase = Phase.COMPILE


class RunError(ProcessFailedError):
    phase = Phase.RUN


class ExecutionTimeoutError(SandboxError, TimeoutError):
    phase = Phase.RUN

    def __init__(self, timeout_ms: int, phase: Phase = Phase.RUN):
        super().__init__("Execution timeout")
        self.timeout_ms = timeout_ms
        self.phase = phase


class StaticCheckError(SandboxError):
    phase = Phase.VALIDATE


class EvaluationError(SandboxError):
    pass
