from __future__ import annotations
import re
from pathlib import Path
from typing import List

import structlog

from ..core.errors import CompileError
from ..core.models import Limits, Phase, State, StrategyKind, Workspace
from ..executor.base import Executor
from .base import ProcessStrategy

log = structlog.get_logger(__name__)

_PUBLIC_CLASS = re.compile(r"public\s+(?:(?:final|abstract)\s+)*class\s+([A-Za-z_$][\w$]*)")


class CompiledStrategy(ProcessStrategy):
    """Two processes: translate, then run the artifact."""
    kind = StrategyKind.COMPILED

    def compile_command(self, source: Path, workspace: Workspace) -> List[str]:
        raise NotImplementedError

    def build(self, source: Path, workspace: Workspace) -> None:
        log.info("submission.state", submission_id=workspace.owner_submission_id,
                 state=State.COMPILING.value)
        self._call(self.compile_command(source, workspace), workspace,
                   self.limits.compile_timeout_ms, CompileError, Phase.COMPILE)


class JavaStrategy(CompiledStrategy):
    def __init__(self, runner: Executor, limits: Limits, *, javac: str = "javac", java: str = "java"):
        super().__init__("java", runner, limits)
        self.javac = javac
        self.java = java

    @staticmethod
    def entry_class(code: str) -> str:
        # javac wants the public class in <Name>.java
        m = _PUBLIC_CLASS.search(code)
        return m.group(1) if m else "Solution"

    def required_tools(self) -> List[str]:
        return [self.javac, self.java]

    def source_name(self, code: str) -> str:
        return f"{self.entry_class(code)}.java"

    def compile_command(self, source: Path, workspace: Workspace) -> List[str]:
        return [self.javac, source.name]

    def run_command(self, source: Path, workspace: Workspace) -> List[str]:
        return [self.java, "-cp", str(workspace.path), source.stem]


class CppStrategy(CompiledStrategy):
    binary = "solution"

    def __init__(self, runner: Executor, limits: Limits, *, gxx: str = "g++"):
        super().__init__("cpp", runner, limits)
        self.gxx = gxx

    def required_tools(self) -> List[str]:
        return [self.gxx]

    def source_name(self, code: str) -> str:
        return "solution.cpp"

    def compile_command(self, source: Path, workspace: Workspace) -> List[str]:
        return [self.gxx, "-o", self.binary, source.name]

    def run_command(self, source: Path, workspace: Workspace) -> List[str]:
        return [str(workspace.path / self.binary)]
