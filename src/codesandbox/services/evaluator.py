from __future__ import annotations
from typing import List, Optional

import requests
import structlog
from pydantic import BaseModel, Field, ValidationError

from ..core.errors import EvaluationError
from ..core.models import CodeQuality, EvaluationResult
from ..settings import Settings

log = structlog.get_logger(__name__)


class Evaluator:
    """Scores a successful run. Optional collaborator, never required by the sandbox."""

    def evaluate(self, code: str, language: str, output: str) -> EvaluationResult:
        raise NotImplementedError


class StaticEvaluator(Evaluator):
    """Fixed baseline scores, used when no AI backend is wired in."""

    def evaluate(self, code: str, language: str, output: str) -> EvaluationResult:
        return EvaluationResult(
            score=75,
            feedback="Basic code evaluation. Connect an AI evaluator for detailed feedback.",
            suggestions=["Consider edge cases and input validation"],
            code_quality=CodeQuality(readability=70, efficiency=80, correctness=75),
        )


# --------- wire schema of the remote evaluator ---------
class CodeQualityPayload(BaseModel):
    readability: float
    efficiency: float
    correctness: float


class EvaluationPayload(BaseModel):
    score: float
    feedback: str
    suggestions: List[str] = Field(default_factory=list)
    codeQuality: CodeQualityPayload

    def to_result(self) -> EvaluationResult:
        q = self.codeQuality
        return EvaluationResult(
            score=self.score,
            feedback=self.feedback,
            suggestions=list(self.suggestions),
            code_quality=CodeQuality(readability=q.readability, efficiency=q.efficiency,
                                     correctness=q.correctness),
        )


class HttpEvaluator(Evaluator):
    def __init__(self, url: str, timeout_s: float = 15.0, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout_s = timeout_s
        self.session = session or requests.Session()

    def evaluate(self, code: str, language: str, output: str) -> EvaluationResult:
        try:
            r = self.session.post(
                self.url,
                json={"code": code, "language": language, "output": output},
                timeout=self.timeout_s,
            )
            r.raise_for_status()
            return EvaluationPayload.model_validate(r.json()).to_result()
        except requests.RequestException as e:
            raise EvaluationError(f"evaluator request failed: {e}") from e
        except (ValueError, ValidationError) as e:
            raise EvaluationError(f"invalid evaluation payload: {e}") from e


def build_evaluator(settings: Settings) -> Optional[Evaluator]:
    kind = (settings.evaluator or "none").lower()
    if kind == "static":
        return StaticEvaluator()
    if kind == "http":
        if not settings.evaluator_url:
            log.warning("evaluator.misconfigured", reason="evaluator_url is empty")
            return None
        return HttpEvaluator(settings.evaluator_url, timeout_s=settings.evaluator_timeout_s)
    return None
