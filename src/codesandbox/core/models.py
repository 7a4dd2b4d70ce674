from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


class StrategyKind(str, Enum):
    INTERPRETED = "interpreted"
    COMPILED = "compiled"
    FRAMEWORK = "framework_heuristic"


class Phase(str, Enum):
    """Stage a failed submission stopped in."""
    SETUP = "setup"
    COMPILE = "compile"
    RUN = "run"
    VALIDATE = "validate"


class State(str, Enum):
    RECEIVED = "received"
    WORKSPACE_CREATED = "workspace_created"
    COMPILING = "compiling"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    WORKSPACE_DESTROYED = "workspace_destroyed"
    EVALUATING = "evaluating"
    RETURNED = "returned"


@dataclass(frozen=True)
class TestCase:
    __test__ = False

    input: str
    expected_output: str
    description: Optional[str] = None


@dataclass(frozen=True)
class Submission:
    code: str
    language: str
    test_cases: Tuple[TestCase, ...] = ()


@dataclass(frozen=True)
class Workspace:
    path: Path                 # <root>/<token>-<submission_id>
    owner_submission_id: str


@dataclass
class TestResult:
    __test__ = False

    passed: bool
    input: str
    expected_output: str
    actual_output: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "passed": self.passed,
            "input": self.input,
            "expectedOutput": self.expected_output,
        }
        if self.actual_output is not None:
            d["actualOutput"] = self.actual_output
        if self.error is not None:
            d["error"] = self.error
        return d


@dataclass
class CodeQuality:
    readability: float
    efficiency: float
    correctness: float


@dataclass
class EvaluationResult:
    score: float
    feedback: str
    suggestions: List[str]
    code_quality: CodeQuality

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "feedback": self.feedback,
            "suggestions": list(self.suggestions),
            "codeQuality": {
                "readability": self.code_quality.readability,
                "efficiency": self.code_quality.efficiency,
                "correctness": self.code_quality.correctness,
            },
        }


@dataclass
class ExecutionResult:
    success: bool
    output: Optional[str] = None
    error: Optional[str] = None
    execution_time_ms: int = 0
    phase: Optional[Phase] = None
    test_results: Optional[List[TestResult]] = None
    ai_evaluation: Optional[EvaluationResult] = None
    runtime_missing: bool = False
    installation_guide: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Wire shape: camelCase keys, absent fields omitted."""
        d: Dict[str, Any] = {"success": self.success, "executionTime": self.execution_time_ms}
        if self.output is not None:
            d["output"] = self.output
        if self.error is not None:
            d["error"] = self.error
        if self.phase is not None:
            d["phase"] = self.phase.value
        if self.test_results is not None:
            d["testResults"] = [t.to_dict() for t in self.test_results]
        if self.ai_evaluation is not None:
            d["aiEvaluation"] = self.ai_evaluation.to_dict()
        if self.runtime_missing:
            d["runtimeMissing"] = True
            d["installationGuide"] = self.installation_guide
        return d


@dataclass
class Limits:
    execution_timeout_ms: int = 10_000
    compile_timeout_ms: int = 10_000
