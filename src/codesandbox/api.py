from __future__ import annotations
import json
from typing import Any, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, field_validator

from .core.errors import EvaluationError, UnsupportedLanguageError
from .core.models import Submission, TestCase
from .logging import setup_logging
from .services.execution_service import ExecutionService
from .settings import load_settings

settings = load_settings()
setup_logging(settings.log_level, json=settings.log_json)

app = FastAPI(title="Code Sandbox API")
# CORS: open for dev; whitelist the FE origin in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

svc = ExecutionService(settings)


# --------- Schemas (camelCase, as the FE sends/expects) ---------
class TestCaseReq(BaseModel):
    input: str = ""
    expectedOutput: str = ""
    description: Optional[str] = None

    @field_validator("input", "expectedOutput", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> str:
        # expected outputs sometimes arrive as numbers/arrays
        if v is None:
            return ""
        return v if isinstance(v, str) else json.dumps(v)


class ExecuteReq(BaseModel):
    code: str = ""
    language: str = ""
    testCases: Optional[List[TestCaseReq]] = None


class TestResultRes(BaseModel):
    passed: bool
    input: str
    expectedOutput: str
    actualOutput: Optional[str] = None
    error: Optional[str] = None


class CodeQualityRes(BaseModel):
    readability: float
    efficiency: float
    correctness: float


class EvaluationRes(BaseModel):
    score: float
    feedback: str
    suggestions: List[str]
    codeQuality: CodeQualityRes


class ExecuteRes(BaseModel):
    success: bool
    output: Optional[str] = None
    error: Optional[str] = None
    executionTime: int
    phase: Optional[str] = None
    testResults: Optional[List[TestResultRes]] = None
    aiEvaluation: Optional[EvaluationRes] = None
    runtimeMissing: Optional[bool] = None
    installationGuide: Optional[str] = None


class EvaluateReq(BaseModel):
    code: str = ""
    language: str = ""
    output: str = ""


class LanguageRes(BaseModel):
    language: str
    strategy: str
    available: bool


# --------- Endpoints ---------

@app.get("/health")
def health():
    return {"ok": True}


@app.get("/languages", response_model=List[LanguageRes])
def languages():
    return [LanguageRes(**row) for row in svc.languages()]


@app.post("/execute", response_model=ExecuteRes, response_model_exclude_none=True)
def execute(req: ExecuteReq):
    if not req.code or not req.language:
        raise HTTPException(status_code=400, detail="Code and language are required")
    submission = Submission(
        code=req.code,
        language=req.language,
        test_cases=tuple(
            TestCase(input=tc.input, expected_output=tc.expectedOutput, description=tc.description)
            for tc in (req.testCases or [])
        ),
    )
    try:
        result = svc.execute(submission)
    except UnsupportedLanguageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ExecuteRes(**result.to_dict())


@app.post("/evaluate", response_model=EvaluationRes)
def evaluate(req: EvaluateReq):
    if not req.code or not req.language:
        raise HTTPException(status_code=400, detail="Code and language are required")
    if svc.aggregator.evaluator is None:
        raise HTTPException(status_code=503, detail="evaluator_not_configured")
    try:
        evaluation = svc.evaluate(req.code, req.language, req.output)
    except EvaluationError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return EvaluationRes(**evaluation.to_dict())
