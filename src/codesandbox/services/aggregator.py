from __future__ import annotations
from typing import Optional

import structlog

from ..core.errors import EvaluationError, ExecutionTimeoutError, SandboxError
from ..core.models import EvaluationResult, ExecutionResult, Phase, State, Submission, TestResult
from .evaluator import Evaluator

log = structlog.get_logger(__name__)


class ResultAggregator:
    """Turns every strategy outcome into one ExecutionResult, then tries the evaluator."""

    def __init__(self, evaluator: Optional[Evaluator] = None):
        self.evaluator = evaluator

    def failure(self, submission: Submission, exc: BaseException) -> ExecutionResult:
        if isinstance(exc, SandboxError):
            phase, msg = exc.phase, str(exc)
        else:
            # anything unexpected counts as a failed run
            phase, msg = Phase.RUN, str(exc) or "Execution failed"
        result = ExecutionResult(success=False, error=msg, phase=phase)
        if submission.test_cases:
            result.test_results = [
                TestResult(passed=False, input=tc.input, expected_output=tc.expected_output, error=msg)
                for tc in submission.test_cases
            ]
        return result

    @staticmethod
    def terminal_state(result: ExecutionResult, exc: Optional[BaseException] = None) -> State:
        if result.success:
            return State.SUCCEEDED
        if isinstance(exc, ExecutionTimeoutError):
            return State.TIMED_OUT
        return State.FAILED

    def enrich(self, submission: Submission, result: ExecutionResult, submission_id: str) -> ExecutionResult:
        if self.evaluator is None or not result.success or not (result.output or "").strip():
            return result
        log.info("submission.state", submission_id=submission_id, state=State.EVALUATING.value)
        try:
            evaluation = self.evaluator.evaluate(submission.code, submission.language, result.output)
            if not isinstance(evaluation, EvaluationResult):
                raise EvaluationError(f"evaluator returned {type(evaluation).__name__}")
        except Exception as e:
            # result stays successful, just without an evaluation
            log.warning("evaluation.failed", submission_id=submission_id, error=str(e))
            return result
        result.ai_evaluation = evaluation
        return result
