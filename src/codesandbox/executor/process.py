from __future__ import annotations
import os, signal, subprocess
import threading
import time
from pathlib import Path
from threading import BoundedSemaphore
from typing import BinaryIO, Dict, List, Optional

import structlog

from ..core.errors import ExecutionTimeoutError, ProcessFailedError
from .base import DEFAULT_COMMAND_TIMEOUT_MS, ExecSpec, Executor

log = structlog.get_logger(__name__)

DEFAULT_MAX_OUTPUT_BYTES = 1 << 20


def _drain(stream: BinaryIO, limit: int, sink: bytearray) -> None:
    """Reads the pipe to EOF, keeping only the first `limit` bytes."""
    for chunk in iter(lambda: stream.read1(65536), b""):
        room = limit - len(sink)
        if room > 0:
            sink.extend(chunk[:room])
    stream.close()


def _decode(raw: bytearray) -> str:
    # same newline handling as text-mode pipes
    return raw.decode("utf-8", errors="replace").replace("\r\n", "\n").replace("\r", "\n")


class ProcessRunner(Executor):
    """
    Runs one child per call and reports exactly one outcome:
    stdout (exit 0), ProcessFailedError (non-zero exit / spawn error)
    or ExecutionTimeoutError (deadline hit, process group killed).

    Both pipes are drained by reader threads that keep at most
    `max_output_bytes` each; anything past that is read and dropped so a
    chatty child neither blocks nor grows the service's memory. The calling
    thread is the only one that decides the outcome.
    """

    def __init__(self, max_concurrency: int = 4, kill_grace_s: float = 2.0,
                 env: Optional[Dict[str, str]] = None,
                 max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES):
        self._slots = BoundedSemaphore(value=max(1, max_concurrency))
        self.kill_grace_s = kill_grace_s
        self.max_output_bytes = max(0, max_output_bytes)
        self.env = {"PYTHONUNBUFFERED": "1", **(env or {})}

    def run(self, command: str, args: List[str], cwd: Path,
            timeout_ms: int = DEFAULT_COMMAND_TIMEOUT_MS) -> str:
        spec = ExecSpec(cmd=[command, *args], workdir=Path(cwd), env=self.env, timeout_ms=timeout_ms)
        with self._slots:
            return self._run_locked(spec)

    def _run_locked(self, spec: ExecSpec) -> str:
        start = time.monotonic()
        try:
            p = subprocess.Popen(
                spec.cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=str(spec.workdir),
                env={**os.environ, **spec.env},
                # own process group so the timeout can take the whole tree down
                start_new_session=True,
            )
        except OSError as e:
            log.info("process.spawn_failed", cmd=spec.cmd[0], error=str(e))
            raise ProcessFailedError(str(e)) from e

        out_raw, err_raw = bytearray(), bytearray()
        readers = [
            threading.Thread(target=_drain, args=(p.stdout, self.max_output_bytes, out_raw), daemon=True),
            threading.Thread(target=_drain, args=(p.stderr, self.max_output_bytes, err_raw), daemon=True),
        ]
        for t in readers:
            t.start()

        if not self._wait(p, readers, start + spec.timeout_s):
            self._kill(p, readers)
            log.info("process.timeout", cmd=spec.cmd[0], pid=p.pid, timeout_ms=spec.timeout_ms)
            raise ExecutionTimeoutError(spec.timeout_ms)

        out, err = _decode(out_raw), _decode(err_raw)
        rc = p.returncode
        log.debug("process.exit", cmd=spec.cmd[0], rc=rc,
                  duration_ms=int((time.monotonic() - start) * 1000))
        if rc == 0:
            return out
        raise ProcessFailedError(err or f"Process exited with code {rc}", exit_code=rc, stdout=out)

    @staticmethod
    def _wait(p: subprocess.Popen, readers: List[threading.Thread], deadline: float) -> bool:
        """True when the child exited and both pipes hit EOF before `deadline`."""
        try:
            p.wait(timeout=max(0.0, deadline - time.monotonic()))
        except subprocess.TimeoutExpired:
            return False
        for t in readers:
            t.join(max(0.0, deadline - time.monotonic()))
        return not any(t.is_alive() for t in readers)

    def _kill(self, p: subprocess.Popen, readers: List[threading.Thread]) -> None:
        try:
            os.killpg(p.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        p.wait()
        deadline = time.monotonic() + self.kill_grace_s
        for t in readers:
            t.join(max(0.0, deadline - time.monotonic()))
        if any(t.is_alive() for t in readers):
            # a descendant left the group and still holds the pipes
            log.warning("process.reap_incomplete", pid=p.pid, grace_s=self.kill_grace_s)
