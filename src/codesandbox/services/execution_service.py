from __future__ import annotations
import time
from typing import Optional

import structlog

from ..core.errors import EvaluationError, SandboxError
from ..core.models import EvaluationResult, ExecutionResult, State, Submission
from ..core.utils import elapsed_ms, new_submission_id
from ..executor.base import Executor
from ..executor.process import ProcessRunner
from ..runners.framework import StaticValidator
from ..runners.registry import LanguageRegistry, build_registry
from ..runners.toolchain import installation_guide, missing_message
from ..settings import Settings, load_settings
from .aggregator import ResultAggregator
from .evaluator import Evaluator, build_evaluator
from .storage import WorkspaceManager

log = structlog.get_logger(__name__)


class ExecutionService:
    """
    Orchestrator: registry + workspace + process runner + aggregator.

    `execute` never raises for a bad program; the only exception that
    reaches the caller is UnsupportedLanguageError, and it is raised
    before anything touches the filesystem.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        workspaces: Optional[WorkspaceManager] = None,
        runner: Optional[Executor] = None,
        registry: Optional[LanguageRegistry] = None,
        evaluator: Optional[Evaluator] = None,
        validator: Optional[StaticValidator] = None,
    ):
        self.settings = settings or load_settings()
        self.runner = runner or ProcessRunner(
            max_concurrency=self.settings.max_concurrency,
            kill_grace_s=self.settings.kill_grace_s,
            max_output_bytes=self.settings.max_output_bytes,
        )
        self.workspaces = workspaces or WorkspaceManager(self.settings.workspace_root)
        self.registry = registry or build_registry(self.settings, self.runner, validator)
        self.aggregator = ResultAggregator(evaluator or build_evaluator(self.settings))

    def execute(self, submission: Submission) -> ExecutionResult:
        strategy = self.registry.resolve(submission.language)

        submission_id = new_submission_id()
        start = time.monotonic()
        log.info("submission.state", submission_id=submission_id, state=State.RECEIVED.value,
                 language=strategy.language, strategy=strategy.kind.value)

        missing = strategy.missing_tools()
        if missing:
            log.warning("toolchain.missing", submission_id=submission_id,
                        language=strategy.language, tools=missing)
            result = self.aggregator.failure(submission, SandboxError(missing_message(strategy.language)))
            result.runtime_missing = True
            result.installation_guide = installation_guide(strategy.language)
            result.execution_time_ms = elapsed_ms(start)
            return result

        exc: Optional[BaseException] = None
        try:
            with self.workspaces.scoped(submission_id) as ws:
                log.info("submission.state", submission_id=submission_id,
                         state=State.WORKSPACE_CREATED.value, path=str(ws.path))
                result = strategy.execute(submission, ws)
        except SandboxError as e:
            exc = e
            result = self.aggregator.failure(submission, e)
        except Exception as e:
            exc = e
            log.exception("submission.unexpected_error", submission_id=submission_id)
            result = self.aggregator.failure(submission, e)
        result.execution_time_ms = elapsed_ms(start)

        log.info("submission.state", submission_id=submission_id,
                 state=self.aggregator.terminal_state(result, exc).value,
                 phase=result.phase.value if result.phase else None,
                 duration_ms=result.execution_time_ms)
        log.info("submission.state", submission_id=submission_id,
                 state=State.WORKSPACE_DESTROYED.value)

        result = self.aggregator.enrich(submission, result, submission_id)
        log.info("submission.state", submission_id=submission_id, state=State.RETURNED.value,
                 success=result.success, evaluated=result.ai_evaluation is not None)
        return result

    def evaluate(self, code: str, language: str, output: str = "") -> EvaluationResult:
        evaluator = self.aggregator.evaluator
        if evaluator is None:
            raise EvaluationError("no evaluator configured")
        try:
            evaluation = evaluator.evaluate(code, language, output)
        except EvaluationError:
            raise
        except Exception as e:
            raise EvaluationError(str(e)) from e
        if not isinstance(evaluation, EvaluationResult):
            raise EvaluationError(f"evaluator returned {type(evaluation).__name__}")
        return evaluation

    def languages(self):
        return self.registry.describe()
