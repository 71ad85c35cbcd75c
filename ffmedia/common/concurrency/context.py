from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional

from ffmedia.domain.enums.cancel_reason import CancelReason

log = logging.getLogger(__name__)


class CancelContext:
    """
    A cancellation signal with an optional deadline, shared between a caller and the
    operation it starts.

    Features
    --------
    - background() -> never fires on its own
    - with_cancel(parent) -> fires on cancel() or when the parent fires
    - with_timeout(seconds, parent) -> additionally fires once the deadline elapses
    - on_done(callback) -> run a callback when the context fires (returns an unregister fn)
    - Context manager support: leaving the block cancels the context and releases its timer

    Notes
    -----
    - Firing is one-shot; the first reason wins.
    - Deadlines are measured on time.monotonic(). A child never outlives its parent's deadline.
    """

    def __init__(self, parent: Optional["CancelContext"] = None, deadline: Optional[float] = None) -> None:
        self._parent = parent
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._reason: Optional[CancelReason] = None
        self._callbacks: List[Callable[[], None]] = []
        self._timer: Optional[threading.Timer] = None
        self._unlink_parent: Optional[Callable[[], None]] = None

        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline

        if parent is not None:
            self._unlink_parent = parent.on_done(lambda: self._fire(parent.reason or CancelReason.canceled))

        if deadline is not None and not self._done.is_set():
            delay = max(0.0, deadline - time.monotonic())
            self._timer = threading.Timer(delay, self._fire, args=(CancelReason.deadline_exceeded,))
            self._timer.daemon = True
            self._timer.start()

    # -------------------------
    # Constructors
    # -------------------------
    @classmethod
    def background(cls) -> "CancelContext":
        return cls()

    @classmethod
    def with_cancel(cls, parent: Optional["CancelContext"] = None) -> "CancelContext":
        return cls(parent=parent)

    @classmethod
    def with_timeout(cls, seconds: float, parent: Optional["CancelContext"] = None) -> "CancelContext":
        return cls(parent=parent, deadline=time.monotonic() + float(seconds))

    # -------------------------
    # State
    # -------------------------
    @property
    def deadline(self) -> Optional[float]:
        """Monotonic deadline, or None when the context has no deadline."""
        return self._deadline

    @property
    def reason(self) -> Optional[CancelReason]:
        """Why the context fired; None while still live."""
        return self._reason

    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the context fires or `timeout` elapses. Returns done()."""
        return self._done.wait(timeout)

    def remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    # -------------------------
    # Signalling
    # -------------------------
    def cancel(self) -> None:
        self._fire(CancelReason.canceled)

    def on_done(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Register `callback` to run once when the context fires.
        If it already fired, the callback runs immediately on the calling thread.
        """
        with self._lock:
            if not self._done.is_set():
                self._callbacks.append(callback)
                return lambda: self._remove_callback(callback)
        callback()
        return lambda: None

    def _remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass  # already fired and drained

    def _fire(self, reason: CancelReason) -> None:
        with self._lock:
            if self._done.is_set():
                return
            self._reason = reason
            self._done.set()
            callbacks, self._callbacks = self._callbacks, []
            timer, self._timer = self._timer, None
            unlink, self._unlink_parent = self._unlink_parent, None

        if timer is not None:
            timer.cancel()
        if unlink is not None:
            unlink()
        for cb in callbacks:
            try:
                cb()
            except Exception:
                log.exception("CancelContext callback failed")

    def __enter__(self) -> "CancelContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.cancel()

    def __repr__(self) -> str:
        state = self._reason.value if self._reason else "live"
        return f"CancelContext(state={state!r}, remaining={self.remaining()})"
