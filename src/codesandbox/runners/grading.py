"""
Test-case harnesses and output comparison.

For javascript and python the submitted function is called once per test
case by a small generated program that prints the JSON-encoded return
value. Every other language is graded on the program's own output.
"""
from __future__ import annotations

import json
import math
import re
from typing import Any, Dict, Optional

NO_FUNCTION = "Error: Could not find function definition in code"

HARNESS_EXT: Dict[str, str] = {
    "javascript": ".js",
    "python": ".py",
}

_FUNCTION_RE = {
    "javascript": re.compile(r"function\s+(\w+)\s*\("),
    "python": re.compile(r"^def\s+(\w+)\s*\(", re.MULTILINE),
}

_JS_TEMPLATE = """{code}

// Call function with test input
const result = {fn}({args});
console.log(JSON.stringify(result));
"""

_PY_TEMPLATE = """{code}

import json as _json
result = {fn}({args})
print(_json.dumps(result))
"""


def find_function(language: str, code: str) -> Optional[str]:
    rx = _FUNCTION_RE.get(language)
    if rx is None:
        return None
    m = rx.search(code)
    return m.group(1) if m else None


def _is_json(text: str) -> bool:
    try:
        _loads(text)
    except ValueError:
        return False
    return True


def build_harness(language: str, code: str, test_input: str) -> Optional[str]:
    """
    Source of a program calling the first declared function with `test_input`.
    A JSON input is passed as one argument; anything else is pasted in as the
    argument list, e.g. "[2,7,11,15], 9".
    """
    fn = find_function(language, code)
    if fn is None:
        return None
    if language == "javascript":
        args = json.dumps(json.loads(test_input)) if _is_json(test_input) else test_input
        return _JS_TEMPLATE.format(code=code, fn=fn, args=args)
    if language == "python":
        args = f"_json.loads({test_input!r})" if _is_json(test_input) else test_input
        return _PY_TEMPLATE.format(code=code, fn=fn, args=args)
    return None


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON
    raise ValueError(name)


def _loads(text: str) -> Any:
    return json.loads(text, parse_constant=_reject_constant)


def _sort_key(v: Any) -> str:
    return json.dumps(v, sort_keys=True)


def _json_equal(actual: Any, expected: Any) -> bool:
    if isinstance(actual, list) and isinstance(expected, list):
        if len(actual) != len(expected):
            return False
        # order of equal-length results is not significant
        if sorted(actual, key=_sort_key) == sorted(expected, key=_sort_key):
            return True
        return actual == expected
    if isinstance(actual, bool) != isinstance(expected, bool):
        return False
    return actual == expected


def _as_number(text: str) -> Optional[float]:
    try:
        n = float(text)
    except ValueError:
        return None
    return n if math.isfinite(n) else None


def outputs_match(actual: str, expected: str) -> bool:
    a, e = actual.strip(), expected.strip()
    try:
        return _json_equal(_loads(a), _loads(e))
    except ValueError:
        pass
    an, en = _as_number(a), _as_number(e)
    if an is not None and en is not None:
        return an == en
    return a.lower() == e.lower()
