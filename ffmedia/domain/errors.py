# ffmedia/domain/errors.py
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ffmedia.services.schemas.probe import ProbeData


@dataclass(eq=False)
class MediaToolError(RuntimeError):
    """Base error for every failure raised while driving ffprobe/ffmpeg."""
    message: str
    binary: Optional[str] = None
    stderr: Optional[str] = None
    rc: Optional[int] = None

    def __str__(self) -> str:
        parts = [self.message]
        if self.rc is not None:
            parts.append(f"(rc={self.rc})")
        if self.stderr:
            parts.append(f"[{self.stderr.strip()}]")
        return " ".join(parts)


@dataclass(eq=False)
class BinaryNotFoundError(MediaToolError):
    """The executable could not be located (PATH lookup or explicit path)."""


@dataclass(eq=False)
class ProcessStartError(MediaToolError):
    """The executable exists but the OS refused to launch it."""


@dataclass(eq=False)
class ProcessTimeoutError(MediaToolError):
    """The context fired before the process finished and the process was killed."""
    reason: Optional[str] = None


@dataclass(eq=False)
class ProcessKillError(MediaToolError):
    """
    The context fired but killing the process failed.
    The subprocess may still be running.
    """


@dataclass(eq=False)
class ProcessExecutionError(MediaToolError):
    """The process ran to completion but exited non-zero (or wrote to stderr when that is treated as failure)."""


@dataclass(eq=False)
class ProbeDecodeError(MediaToolError):
    """
    ffprobe output was captured but is not the expected JSON.
    `partial` holds whatever result was constructed before decoding failed; never treat it as valid.
    """
    partial: Optional["ProbeData"] = None


@dataclass(eq=False)
class NotConfiguredError(MediaToolError):
    """An operation was invoked without its required option."""
