from __future__ import annotations
import os
from pathlib import Path
from typing import List, Optional

import structlog

from ..core.errors import CompileError, ExecutionTimeoutError, ProcessFailedError, RunError, SandboxError
from ..core.models import (ExecutionResult, Limits, Phase, State, StrategyKind, Submission,
                           TestResult, Workspace)
from ..executor.base import Executor
from . import grading, toolchain

log = structlog.get_logger(__name__)


def strip_workspace(text: str, workspace: Workspace) -> str:
    """Drops the workspace directory from paths so messages read the same on every run."""
    if not text:
        return text
    roots = {str(workspace.path), str(workspace.path.resolve())}
    # longest first: the resolved path may contain the other one
    for root in sorted(roots, key=len, reverse=True):
        text = text.replace(root + os.sep, "")
    return text


class ExecutionStrategy:
    kind: StrategyKind

    def __init__(self, language: str):
        self.language = language

    def required_tools(self) -> List[str]:
        return []

    def missing_tools(self) -> List[str]:
        return [t for t, ok in toolchain.probe(self.required_tools()).items() if not ok]

    def execute(self, submission: Submission, workspace: Workspace) -> ExecutionResult:
        """Success only; failures are raised as SandboxError subclasses."""
        raise NotImplementedError


class ProcessStrategy(ExecutionStrategy):
    """Writes the source into the workspace and runs it through an Executor."""

    def __init__(self, language: str, runner: Executor, limits: Limits):
        super().__init__(language)
        self.runner = runner
        self.limits = limits

    # ---- hooks ----
    def source_name(self, code: str) -> str:
        raise NotImplementedError

    def run_command(self, source: Path, workspace: Workspace) -> List[str]:
        raise NotImplementedError

    def build(self, source: Path, workspace: Workspace) -> None:
        pass

    def harness_command(self, harness: Path) -> Optional[List[str]]:
        return None

    # ---- pipeline ----
    def execute(self, submission: Submission, workspace: Workspace) -> ExecutionResult:
        source = workspace.path / self.source_name(submission.code)
        source.write_text(submission.code, encoding="utf-8")

        self.build(source, workspace)

        log.info("submission.state", submission_id=workspace.owner_submission_id,
                 state=State.EXECUTING.value)
        output = self._call(self.run_command(source, workspace), workspace,
                            self.limits.execution_timeout_ms, RunError, Phase.RUN)

        test_results = None
        if submission.test_cases:
            test_results = self._grade(submission, workspace, output)
        return ExecutionResult(success=True, output=output.strip(), test_results=test_results)

    def _call(self, argv: List[str], workspace: Workspace, timeout_ms: int,
              error_cls=RunError, phase: Phase = Phase.RUN) -> str:
        try:
            return strip_workspace(self.runner.run(argv[0], argv[1:], workspace.path, timeout_ms), workspace)
        except ExecutionTimeoutError as e:
            e.phase = phase
            raise
        except ProcessFailedError as e:
            msg = strip_workspace(str(e), workspace)
            if error_cls is CompileError:
                msg = f"Compilation failed: {msg}"
            raise error_cls(msg, exit_code=e.exit_code,
                            stdout=strip_workspace(e.stdout, workspace)) from e

    def _grade(self, submission: Submission, workspace: Workspace, output: str) -> List[TestResult]:
        results: List[TestResult] = []
        for index, tc in enumerate(submission.test_cases):
            try:
                actual = self._actual_output(submission, workspace, index, tc.input, output)
            except SandboxError as e:
                results.append(TestResult(passed=False, input=tc.input,
                                          expected_output=tc.expected_output, error=str(e)))
                continue
            results.append(TestResult(
                passed=grading.outputs_match(actual, tc.expected_output),
                input=tc.input,
                expected_output=tc.expected_output,
                actual_output=actual,
            ))
        return results

    def _actual_output(self, submission: Submission, workspace: Workspace, index: int,
                       test_input: str, program_output: str) -> str:
        ext = grading.HARNESS_EXT.get(self.language)
        if ext is None:
            return program_output.strip()
        script = grading.build_harness(self.language, submission.code, test_input)
        if script is None:
            return grading.NO_FUNCTION
        harness = workspace.path / f"test_case_{index}{ext}"
        harness.write_text(script, encoding="utf-8")
        argv = self.harness_command(harness)
        if argv is None:
            return program_output.strip()
        return self._call(argv, workspace, self.limits.execution_timeout_ms).strip()
