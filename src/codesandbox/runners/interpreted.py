from __future__ import annotations
from pathlib import Path
from typing import List, Optional

from ..core.models import Limits, StrategyKind, Workspace
from ..executor.base import Executor
from .base import ProcessStrategy


class InterpretedStrategy(ProcessStrategy):
    """`<interpreter...> solution.<ext>`, one process, nothing kept."""
    kind = StrategyKind.INTERPRETED

    def __init__(self, language: str, runner: Executor, limits: Limits, *,
                 source: str, interpreter: List[str], tools: Optional[List[str]] = None,
                 harness: bool = False):
        super().__init__(language, runner, limits)
        self.source = source
        self.interpreter = list(interpreter)
        self.tools = list(tools) if tools is not None else [interpreter[0]]
        self.harness = harness

    def required_tools(self) -> List[str]:
        return self.tools

    def source_name(self, code: str) -> str:
        return self.source

    def run_command(self, source: Path, workspace: Workspace) -> List[str]:
        return [*self.interpreter, source.name]

    def harness_command(self, harness: Path) -> Optional[List[str]]:
        if not self.harness:
            return None
        return [*self.interpreter, harness.name]
