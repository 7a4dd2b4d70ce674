from __future__ import annotations
import random, string, time
import uuid


def new_submission_id() -> str:
    suf = "".join(random.choice(string.hexdigits.lower()) for _ in range(6))
    return f"{int(time.time())}-{suf}"


def new_token() -> str:
    return uuid.uuid4().hex[:12]


def normalize_language(language: str) -> str:
    return (language or "").strip().lower()


def elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)
