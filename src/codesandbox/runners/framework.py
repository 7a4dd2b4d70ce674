"""
Heuristic validation for component-markup and stylesheet languages.

No toolchain is invoked and the submitted code is never executed: each
language has a table of required and discouraged substrings, and the
success report lists which well-known idioms were spotted. A short sleep
stands in for real compile latency. Passing these checks says nothing about
whether the code would actually build.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

import structlog

from ..core.errors import StaticCheckError
from ..core.models import ExecutionResult, State, StrategyKind, Submission, Workspace
from .base import ExecutionStrategy

log = structlog.get_logger(__name__)

Idiom = Tuple[Tuple[str, ...], str]   # (any of these substrings, report line)

OK = "✅"


@dataclass(frozen=True)
class FrameworkRule:
    label: str
    header: str
    footer: str
    delay_ms: int
    # each entry is satisfied when any of its alternatives is present
    required: Tuple[Tuple[str, ...], ...] = ()
    discouraged: Tuple[str, ...] = ()
    idioms: Tuple[Idiom, ...] = ()
    balanced_braces: bool = False
    missing_template: str = "{label} Error: Missing required patterns: {missing}"


_REACT_IDIOMS: Tuple[Idiom, ...] = (
    (("useState",), "State management detected"),
    (("useEffect",), "Side effects handled"),
    (("Props", "interface"), "TypeScript props defined"),
)

_CSS_IDIOMS: Tuple[Idiom, ...] = (
    (("display: flex", "display: grid"), "Modern layout techniques detected"),
    (("@media",), "Responsive design media queries found"),
    (("transition", "animation"), "CSS animations/transitions implemented"),
)

_SCSS_IDIOMS: Tuple[Idiom, ...] = (
    (("$",), "SCSS variables detected"),
    (("@mixin", "@include"), "SCSS mixins found"),
    (("@import", "@use"), "SCSS imports detected"),
)

_PSEUDO_IDIOMS: Tuple[Idiom, ...] = (
    ((":hover", ":focus"), "Interactive pseudo-classes implemented"),
)


def _component(label: str, footer: str, required: Tuple[str, ...], idioms: Tuple[Idiom, ...],
               discouraged: Tuple[str, ...] = ()) -> FrameworkRule:
    return FrameworkRule(
        label=label,
        header=f"{label} component compiled successfully!",
        footer=footer,
        delay_ms=1000,
        required=tuple((p,) for p in required),
        discouraged=discouraged,
        idioms=idioms,
    )


def _stylesheet(label: str, idioms: Tuple[Idiom, ...]) -> FrameworkRule:
    return FrameworkRule(
        label=label,
        header=f"{label} syntax validation passed",
        footer=f"{label} styles ready for application",
        delay_ms=600,
        idioms=idioms,
        balanced_braces=True,
    )


RULES: Dict[str, FrameworkRule] = {
    "jsx": _component(
        "React JSX", "Component ready for rendering",
        required=("function", "return", "<"),
        discouraged=("class extends Component",),
        idioms=_REACT_IDIOMS,
    ),
    "tsx": _component(
        "React TSX", "Component ready for rendering",
        required=("function", "return", "<", "React"),
        idioms=_REACT_IDIOMS,
    ),
    "vue": _component(
        "Vue SFC", "Single File Component ready",
        required=("<template>", "<script>", "export default"),
        idioms=(
            (("ref(", "reactive("), "Vue 3 Composition API detected"),
            (("v-model", "@click"), "Vue directives found"),
            (("<style scoped>",), "Scoped styles applied"),
        ),
    ),
    "angular": _component(
        "Angular", "Angular component ready for module",
        required=("@Component", "export class"),
        idioms=(
            (("@Input", "@Output"), "Component communication set up"),
            (("OnInit", "OnDestroy"), "Lifecycle hooks implemented"),
            (("Observable",), "RxJS reactive patterns detected"),
        ),
    ),
    "svelte": _component(
        "Svelte", "Svelte component compiled and optimized",
        required=("<script>", "let "),
        idioms=(
            (("$:",), "Reactive statements found"),
            (("onMount",), "Lifecycle hooks detected"),
            (("{#if", "{#each"), "Template logic implemented"),
        ),
    ),
    "html": FrameworkRule(
        label="HTML",
        header="HTML document structure validated",
        footer="HTML document ready for browser rendering",
        delay_ms=500,
        required=(("<!DOCTYPE", "<html"),),
        missing_template="{label} Error: Missing document structure (DOCTYPE or html tag): {missing}",
        idioms=(
            (("<!DOCTYPE html>",), "HTML5 DOCTYPE declared"),
            (("<meta charset",), "Character encoding specified"),
            (('<meta name="viewport"',), "Responsive viewport meta tag found"),
            (("alt=",), "Image accessibility attributes detected"),
            (("aria-",), "ARIA accessibility attributes found"),
            (("<main>", "<section>"), "Semantic HTML elements used"),
        ),
    ),
    "css": _stylesheet("CSS", _CSS_IDIOMS + _PSEUDO_IDIOMS),
    "scss": _stylesheet("SCSS", _CSS_IDIOMS + _SCSS_IDIOMS + _PSEUDO_IDIOMS),
}


class StaticValidator:
    def __init__(self, simulate_latency: bool = True, sleep: Callable[[float], None] = time.sleep):
        self.simulate_latency = simulate_latency
        self.sleep = sleep

    def validate(self, rule: FrameworkRule, code: str) -> str:
        """Report text on success, StaticCheckError otherwise."""
        if self.simulate_latency:
            self.sleep(rule.delay_ms / 1000.0)

        missing = [alts for alts in rule.required if not any(p in code for p in alts)]
        if missing:
            names = ", ".join(" or ".join(alts) for alts in missing)
            raise StaticCheckError(rule.missing_template.format(label=rule.label, missing=names))

        if rule.balanced_braces:
            opening, closing = code.count("{"), code.count("}")
            if opening != closing:
                raise StaticCheckError(
                    f"{rule.label} Error: Mismatched braces ({opening} opening, {closing} closing)"
                )

        found = [p for p in rule.discouraged if p in code]
        if found:
            raise StaticCheckError(f"{rule.label} Warning: Consider avoiding: {', '.join(found)}")

        lines: List[str] = [f"{OK} {rule.header}"]
        for patterns, line in rule.idioms:
            if any(p in code for p in patterns):
                lines.append(f"{OK} {line}")
        lines.append(f"{OK} {rule.footer}")
        return "\n".join(lines)


class FrameworkStrategy(ExecutionStrategy):
    kind = StrategyKind.FRAMEWORK

    def __init__(self, language: str, validator: StaticValidator):
        super().__init__(language)
        self.rule = RULES[language]
        self.validator = validator

    def execute(self, submission: Submission, workspace: Workspace) -> ExecutionResult:
        log.info("submission.state", submission_id=workspace.owner_submission_id,
                 state=State.EXECUTING.value, validator=self.rule.label)
        report = self.validator.validate(self.rule, submission.code)
        return ExecutionResult(success=True, output=report)
