from __future__ import annotations
from pathlib import Path
from typing import Optional, Protocol
from ffmedia.common.concurrency.context import CancelContext
from ffmedia.services.schemas.probe import ProbeData

class MediaProbePort(Protocol):
    def probe(self, path: str | Path, timeout_sec: Optional[float] = None) -> ProbeData: ...

    def probe_context(self, ctx: CancelContext, path: str | Path) -> ProbeData: ...

    def probe_with_options(self, ctx: CancelContext, path: str | Path, *extra_args: str) -> ProbeData: ...
