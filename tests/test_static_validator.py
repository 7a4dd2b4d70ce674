import pytest

from codesandbox.core.errors import StaticCheckError
from codesandbox.core.models import Phase, Submission
from codesandbox.runners.framework import RULES, StaticValidator


@pytest.fixture
def validator(sleeper):
    return StaticValidator(sleep=sleeper)


def test_html_without_document_structure(service):
    res = service.execute(Submission(code="<p>hi</p>", language="html"))
    assert res.success is False
    assert res.phase is Phase.VALIDATE
    assert res.error == "HTML Error: Missing document structure (DOCTYPE or html tag): <!DOCTYPE or <html"


def test_html_report_lists_idioms(validator):
    code = '<!DOCTYPE html><html><head><meta charset="utf-8"></head><main><img alt="x"></main></html>'
    report = validator.validate(RULES["html"], code)
    assert "HTML5 DOCTYPE declared" in report
    assert "Character encoding specified" in report
    assert "Image accessibility attributes detected" in report
    assert "Semantic HTML elements used" in report
    assert "ARIA" not in report
    assert report.splitlines()[-1].endswith("HTML document ready for browser rendering")


def test_missing_required_patterns_are_enumerated(validator):
    with pytest.raises(StaticCheckError) as ei:
        validator.validate(RULES["vue"], "<template><div/></template>")
    assert str(ei.value) == "Vue SFC Error: Missing required patterns: <script>, export default"


def test_discouraged_pattern_is_a_warning(validator):
    code = "export default class extends Component { render() { return <div/> } }\nfunction f() { return 1 }"
    with pytest.raises(StaticCheckError) as ei:
        validator.validate(RULES["jsx"], code)
    assert str(ei.value) == "React JSX Warning: Consider avoiding: class extends Component"


def test_class_extends_with_name_is_not_the_discouraged_literal(validator):
    code = "class App extends Component {}\nfunction App2() { return <div/> }"
    assert "React JSX component compiled successfully!" in validator.validate(RULES["jsx"], code)


def test_react_idioms(validator):
    code = "import React, { useState } from 'react'\nfunction C() { const [a] = useState(0); return <b>{a}</b> }"
    report = validator.validate(RULES["tsx"], code)
    assert "State management detected" in report
    assert "Side effects handled" not in report


def test_css_brace_mismatch(validator):
    with pytest.raises(StaticCheckError) as ei:
        validator.validate(RULES["css"], ".a { color: red; ")
    assert str(ei.value) == "CSS Error: Mismatched braces (1 opening, 0 closing)"


def test_scss_idioms(validator):
    code = "$c: red;\n@mixin m { color: $c; }\n.a { @include m; display: flex; }\n.a:hover { color: blue; }"
    report = validator.validate(RULES["scss"], code)
    for line in ("SCSS variables detected", "SCSS mixins found",
                 "Modern layout techniques detected", "Interactive pseudo-classes implemented"):
        assert line in report
    assert report.splitlines()[-1].endswith("SCSS styles ready for application")


@pytest.mark.parametrize("lang,seconds", [("jsx", 1.0), ("html", 0.5), ("css", 0.6), ("scss", 0.6)])
def test_synthetic_latency(sleeper, lang, seconds):
    validator = StaticValidator(sleep=sleeper)
    try:
        validator.validate(RULES[lang], "")
    except StaticCheckError:
        pass
    assert sleeper.calls == [seconds]


def test_latency_can_be_disabled(sleeper):
    StaticValidator(simulate_latency=False, sleep=sleeper).validate(RULES["css"], "a {}")
    assert sleeper.calls == []


def test_validation_is_deterministic(validator):
    code = "<script>\nlet x = 1;\n$: y = x * 2;\n</script>\n{#if x}<p>{y}</p>{/if}"
    first = validator.validate(RULES["svelte"], code)
    assert validator.validate(RULES["svelte"], code) == first
    assert "Reactive statements found" in first
    assert "Template logic implemented" in first


def test_framework_submission_never_executes(service, workspaces):
    res = service.execute(Submission(code="<template></template><script>export default {}</script>",
                                     language="vue"))
    assert res.success is True
    assert "Single File Component ready" in res.output
    assert workspaces.live == set()
