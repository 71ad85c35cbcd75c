# ffmedia/services/process/runner.py
from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import threading
from dataclasses import dataclass
from typing import Optional, Sequence

from ffmedia.common.concurrency.context import CancelContext
from ffmedia.common.logging import get_logger
from ffmedia.common.settings import get_settings
from ffmedia.domain.enums.capture_mode import CaptureMode
from ffmedia.domain.errors import (
    BinaryNotFoundError,
    ProcessExecutionError,
    ProcessKillError,
    ProcessStartError,
    ProcessTimeoutError,
)

logger = get_logger(__name__)


@dataclass
class _Outcome:
    """Filled in by the waiter thread once the process has exited."""
    finished: bool = False
    stdout: bytes = b""
    stderr: bytes = b""
    rc: Optional[int] = None
    error: Optional[BaseException] = None


def _decode(b: bytes) -> str:
    return b.decode("utf-8", "replace")


def _locate(binary: str) -> Optional[str]:
    """Path the OS would exec for `binary`, or None when nothing is there."""
    if os.sep in binary or (os.altsep and os.altsep in binary):
        return binary if os.path.exists(binary) else None
    return shutil.which(binary)


class ProcessRunner:
    """
    Runs one external command per call and races its completion against a CancelContext.
    Both output streams are held in memory until the process exits; nothing is streamed to the caller.
    Safe to share between threads (no per-call state is kept on the instance).
    """

    def __init__(self, kill_grace_sec: Optional[float] = None) -> None:
        cfg = get_settings()
        self.kill_grace_sec = float(cfg.process.kill_grace_sec if kill_grace_sec is None else kill_grace_sec)

    def run(
        self,
        binary: str,
        args: Sequence[str],
        ctx: CancelContext,
        *,
        capture: CaptureMode = CaptureMode.stdout,
    ) -> bytes:
        """
        Execute `binary args...` and return its stdout bytes.

        Raises:
            BinaryNotFoundError: the executable does not exist.
            ProcessStartError: the OS could not launch it for another reason.
            ProcessTimeoutError: `ctx` fired first and the process was killed.
            ProcessKillError: `ctx` fired first and the kill itself failed.
            ProcessExecutionError: non-zero exit, a wait failure, or (CaptureMode.stdout_stderr)
                any stderr output.
        """
        cmd = [binary, *args]
        logger.debug("exec: %s", shlex.join(cmd))

        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except FileNotFoundError as e:
            # ENOENT also covers a present script whose interpreter is missing
            if _locate(binary) is None:
                raise BinaryNotFoundError(f"{binary} bin not found", binary=binary) from e
            raise ProcessStartError(f"failed to start {binary}: {e.strerror or e}", binary=binary) from e
        except OSError as e:
            raise ProcessStartError(f"failed to start {binary}: {e.strerror or e}", binary=binary) from e

        outcome = _Outcome()
        wake = threading.Event()
        waiter = threading.Thread(
            target=self._wait,
            args=(proc, outcome, wake),
            name=f"wait-{proc.pid}",
            daemon=True,
        )
        waiter.start()

        unregister = ctx.on_done(wake.set)
        try:
            wake.wait()
        except BaseException:
            # interrupted caller (KeyboardInterrupt etc.): do not leave the child running
            if not outcome.finished:
                self._abandon(binary, proc)
            raise
        finally:
            unregister()

        # natural completion wins when both sides are ready
        if outcome.finished:
            return self._classify(binary, outcome, capture)
        raise self._kill(binary, proc, ctx)

    # ---- internals ----
    @staticmethod
    def _wait(proc: subprocess.Popen, outcome: _Outcome, wake: threading.Event) -> None:
        try:
            outcome.stdout, outcome.stderr = proc.communicate()
            outcome.rc = proc.returncode
        except BaseException as e:  # handed back to the calling thread
            outcome.error = e
        finally:
            outcome.finished = True
            wake.set()

    @staticmethod
    def _classify(binary: str, outcome: _Outcome, capture: CaptureMode) -> bytes:
        if outcome.error is not None:
            raise ProcessExecutionError(f"waiting for {binary} failed", binary=binary) from outcome.error

        stderr = _decode(outcome.stderr)
        if outcome.rc != 0:
            raise ProcessExecutionError(
                f"{binary} exited with non-zero status", binary=binary, stderr=stderr, rc=outcome.rc
            )
        if capture == CaptureMode.stdout_stderr and outcome.stderr:
            raise ProcessExecutionError(f"{binary} error", binary=binary, stderr=stderr, rc=outcome.rc)
        return outcome.stdout

    def _kill(self, binary: str, proc: subprocess.Popen, ctx: CancelContext) -> ProcessTimeoutError:
        """Kill the process and return the timeout error to raise; a failed kill raises ProcessKillError."""
        reason = str(ctx.reason) if ctx.reason else None
        logger.warning("killing %s (pid %s): %s", binary, proc.pid, reason)
        try:
            proc.kill()
        except OSError as e:
            logger.error("failed to kill %s (pid %s): %s", binary, proc.pid, e)
            raise ProcessKillError(f"failed to kill {binary} (pid {proc.pid})", binary=binary) from e

        try:
            proc.wait(timeout=self.kill_grace_sec)
        except subprocess.TimeoutExpired:
            logger.warning("%s (pid %s) not reaped within %.1fs of kill", binary, proc.pid, self.kill_grace_sec)

        return ProcessTimeoutError(
            f"process timeout exceeded ({reason})", binary=binary, rc=proc.returncode, reason=reason
        )

    def _abandon(self, binary: str, proc: subprocess.Popen) -> None:
        """Best-effort kill while another exception is propagating; failures are only logged."""
        logger.warning("interrupted, killing %s (pid %s)", binary, proc.pid)
        try:
            proc.kill()
        except OSError as e:
            logger.error("failed to kill %s (pid %s): %s", binary, proc.pid, e)
            return
        try:
            proc.wait(timeout=self.kill_grace_sec)
        except subprocess.TimeoutExpired:
            logger.warning("%s (pid %s) not reaped within %.1fs of kill", binary, proc.pid, self.kill_grace_sec)
