from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.models import Limits

DEFAULT_RUNTIMES: Dict[str, str] = {
    # interpreter of the service itself, same as the host-mode executor
    "python": sys.executable or "python3",
    "node": "node",
    "npx": "npx",
    "javac": "javac",
    "java": "java",
    "gxx": "g++",
}


class Settings(BaseSettings):
    # ---- workspace ----
    workspace_root: Path = Path(tempfile.gettempdir()) / "codesandbox"

    # ---- timeouts (ms) ----
    execution_timeout_ms: int = 10_000
    command_timeout_ms: int = 5_000
    compile_timeout_ms: int = 10_000
    kill_grace_s: float = 2.0

    # ---- process gating ----
    max_concurrency: int = 4
    max_output_bytes: int = 1_048_576

    # ---- static validator ----
    simulate_latency: bool = True

    # ---- toolchain binaries (override DEFAULT_RUNTIMES) ----
    runtimes: Dict[str, str] = {}

    # ---- evaluator: none | static | http ----
    evaluator: str = "none"
    evaluator_url: Optional[str] = None
    evaluator_timeout_s: float = 15.0

    # ---- logging ----
    log_level: str = "INFO"
    log_json: bool = True

    # env prefix SBX_*
    model_config = SettingsConfigDict(env_prefix="SBX_", extra="ignore")

    def runtime(self, name: str) -> str:
        return self.runtimes.get(name) or DEFAULT_RUNTIMES[name]

    def limits(self) -> Limits:
        return Limits(
            execution_timeout_ms=self.execution_timeout_ms,
            compile_timeout_ms=self.compile_timeout_ms,
        )


def _block(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    val = data.get(key) or {}
    return val if isinstance(val, dict) else {}


def load_settings(path: Optional[str] = None) -> Settings:
    # 0) base from env SBX_*
    s = Settings()

    # 1) conf/sandbox.yaml (or SANDBOX_CONF)
    sbx_yaml = path or os.environ.get("SANDBOX_CONF", "conf/sandbox.yaml")
    try:
        with open(sbx_yaml, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        data = {}
    if not isinstance(data, dict):
        data = {}

    defaults = _block(data, "defaults")
    evaluator = _block(data, "evaluator")
    logging_cfg = _block(data, "logging")
    runtimes = {str(k): str(v) for k, v in _block(data, "runtimes").items()}

    # 2) merge, keeping the declared types
    return s.model_copy(
        update={
            "workspace_root": Path(str(data.get("workspace_root", s.workspace_root))),
            "execution_timeout_ms": int(defaults.get("execution_timeout_ms", s.execution_timeout_ms)),
            "command_timeout_ms": int(defaults.get("command_timeout_ms", s.command_timeout_ms)),
            "compile_timeout_ms": int(defaults.get("compile_timeout_ms", s.compile_timeout_ms)),
            "kill_grace_s": float(defaults.get("kill_grace_s", s.kill_grace_s)),
            "max_concurrency": int(defaults.get("max_concurrency", s.max_concurrency)),
            "max_output_bytes": int(defaults.get("max_output_bytes", s.max_output_bytes)),
            "simulate_latency": bool(defaults.get("simulate_latency", s.simulate_latency)),
            "runtimes": {**s.runtimes, **runtimes},
            "evaluator": str(evaluator.get("kind", s.evaluator)),
            "evaluator_url": evaluator.get("url", s.evaluator_url),
            "evaluator_timeout_s": float(evaluator.get("timeout_s", s.evaluator_timeout_s)),
            "log_level": str(logging_cfg.get("level", s.log_level)),
            "log_json": bool(logging_cfg.get("json", s.log_json)),
        }
    )
