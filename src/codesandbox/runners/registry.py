from __future__ import annotations
from typing import Dict, List, Optional

from ..core.errors import UnsupportedLanguageError
from ..core.utils import normalize_language
from ..executor.base import Executor
from ..settings import Settings
from .base import ExecutionStrategy
from .compiled import CppStrategy, JavaStrategy
from .framework import RULES, FrameworkStrategy, StaticValidator
from .interpreted import InterpretedStrategy


class LanguageRegistry:
    """language id -> strategy; adding a language is one `register` call."""

    def __init__(self):
        self._strategies: Dict[str, ExecutionStrategy] = {}
        self._aliases: Dict[str, str] = {}

    def register(self, strategy: ExecutionStrategy, *aliases: str) -> None:
        self._strategies[strategy.language] = strategy
        for a in aliases:
            self._aliases[a] = strategy.language

    def resolve(self, language: str) -> ExecutionStrategy:
        key = normalize_language(language)
        key = self._aliases.get(key, key)
        try:
            return self._strategies[key]
        except KeyError:
            raise UnsupportedLanguageError(language) from None

    def languages(self) -> List[str]:
        return list(self._strategies)

    def describe(self) -> List[Dict[str, object]]:
        return [
            {"language": lang, "strategy": s.kind.value, "available": not s.missing_tools()}
            for lang, s in self._strategies.items()
        ]


def build_registry(settings: Settings, runner: Executor,
                   validator: Optional[StaticValidator] = None) -> LanguageRegistry:
    limits = settings.limits()
    validator = validator or StaticValidator(simulate_latency=settings.simulate_latency)
    node, npx = settings.runtime("node"), settings.runtime("npx")

    reg = LanguageRegistry()
    reg.register(InterpretedStrategy(
        "javascript", runner, limits, source="solution.js", interpreter=[node], harness=True,
    ))
    reg.register(InterpretedStrategy(
        "python", runner, limits, source="solution.py",
        interpreter=[settings.runtime("python")], harness=True,
    ))
    reg.register(InterpretedStrategy(
        "typescript", runner, limits, source="solution.ts",
        interpreter=[npx, "ts-node"], tools=[npx, node],
    ))
    reg.register(JavaStrategy(runner, limits, javac=settings.runtime("javac"),
                              java=settings.runtime("java")))
    reg.register(CppStrategy(runner, limits, gxx=settings.runtime("gxx")), "c++")
    for lang in RULES:
        reg.register(FrameworkStrategy(lang, validator))
    return reg
