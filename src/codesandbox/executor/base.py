from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

DEFAULT_COMMAND_TIMEOUT_MS = 5_000


@dataclass
class ExecSpec:
    cmd: List[str]
    workdir: Path
    env: Dict[str, str] = field(default_factory=dict)
    timeout_ms: int = DEFAULT_COMMAND_TIMEOUT_MS

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0


class Executor:
    def run(self, command: str, args: List[str], cwd: Path,
            timeout_ms: int = DEFAULT_COMMAND_TIMEOUT_MS) -> str: ...
