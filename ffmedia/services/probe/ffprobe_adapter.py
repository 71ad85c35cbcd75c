# ffmedia/services/probe/ffprobe_adapter.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

from ffmedia.common.concurrency.context import CancelContext
from ffmedia.common.logging import get_logger
from ffmedia.common.probe.ffprobe_helpers import FATAL_LOGGING, QUIET_LOGGING, build_ffprobe_args, decode_probe_data
from ffmedia.common.settings import get_settings
from ffmedia.domain.enums.capture_mode import CaptureMode
from ffmedia.domain.ports.probe import MediaProbePort
from ffmedia.services.process.runner import ProcessRunner
from ffmedia.services.schemas.probe import ProbeData

logger = get_logger(__name__)


class FFprobeAdapter(MediaProbePort):
    """
    Infrastructure adapter implementing MediaProbePort using `ffprobe`.
    The binary is fixed at construction; instances are safe to share between threads.
    """

    def __init__(
        self,
        ffprobe_bin: Optional[str] = None,
        timeout_sec: Optional[float] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        cfg = get_settings()
        # a bare name is looked up on PATH at call time; a missing binary surfaces as BinaryNotFoundError
        self.ffprobe_bin = ffprobe_bin or cfg.ffprobe.bin
        self.timeout_sec = float(cfg.ffprobe.timeout_sec if timeout_sec is None else timeout_sec)
        self.runner = runner or ProcessRunner()

    # ---- Port API -------------------------------------------------------------
    def probe(self, path: str | Path, timeout_sec: Optional[float] = None) -> ProbeData:
        """
        Probe `path`, killing ffprobe if it runs longer than `timeout_sec`
        (defaults to the adapter timeout). Prefer probe_context() when you already hold a context.
        """
        with CancelContext.with_timeout(self.timeout_sec if timeout_sec is None else timeout_sec) as ctx:
            return self.probe_context(ctx, path)

    def probe_context(self, ctx: CancelContext, path: str | Path) -> ProbeData:
        """Probe `path`; ffprobe is killed if `ctx` fires first."""
        args = build_ffprobe_args(path, logging_args=QUIET_LOGGING)
        out = self.runner.run(self.ffprobe_bin, args, ctx)
        return decode_probe_data(out, binary=self.ffprobe_bin)

    def probe_with_options(self, ctx: CancelContext, path: str | Path, *extra_args: str) -> ProbeData:
        """
        Probe `path` with extra ffprobe arguments inserted before the path.
        Runs at fatal log level and treats anything written to stderr as a failure.
        """
        args = build_ffprobe_args(path, extra_args, logging_args=FATAL_LOGGING)
        out = self.runner.run(self.ffprobe_bin, args, ctx, capture=CaptureMode.stdout_stderr)
        data = decode_probe_data(out, binary=self.ffprobe_bin)
        logger.debug("probed %s: %d stream(s)", path, len(data.streams))
        return data
