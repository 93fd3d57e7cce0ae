"""
Timer and voice bookkeeping for the terminal widget.

Every delayed callback and every sounding voice is registered in a
CancellationScope. Stopping a scope cancels its pending timers, stops its
voices and tears down its child scopes, so an interrupted playback cannot
leave anything behind.
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)


class Cancellable(Protocol):
    def cancel(self) -> Any: ...


class Voice(Protocol):
    def stop(self) -> None: ...


class Clock(Protocol):
    """Schedules a callback after a delay in seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class LoopClock:
    """Clock backed by the running asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(delay, 0.0), callback)


class _NoopHandle:
    def cancel(self) -> None:
        return None


class ScheduledCall:
    """A timer registered in a scope; it leaves the scope when it fires or is cancelled."""

    def __init__(self, scope: "CancellationScope", callback: Callable[[], None]) -> None:
        self._scope = scope
        self._callback = callback
        self._handle: Optional[Cancellable] = None
        self.cancelled = False

    def _fire(self) -> None:
        if self.cancelled:
            return
        try:
            self._callback()
        finally:
            self._scope._discard_timer(self)

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        if self._handle is not None:
            self._handle.cancel()
        self._scope._discard_timer(self)


class CancellationScope:
    """Owns pending timers, running tasks and active voices."""

    def __init__(
        self, clock: Clock, parent: Optional["CancellationScope"] = None
    ) -> None:
        self.clock = clock
        self._parent = parent
        self._timers: List[Cancellable] = []
        self._voices: List[Voice] = []
        self._children: List["CancellationScope"] = []
        self.closed = False
        self._draining = False

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        """Schedule `callback` after `delay` seconds unless the scope is stopped first."""
        if self.closed:
            logger.debug("Ignoring timer scheduled on a closed scope")
            return _NoopHandle()
        call = ScheduledCall(self, callback)
        self._timers.append(call)
        call._handle = self.clock.call_later(delay, call._fire)
        return call

    def track(self, task: "asyncio.Future[Any]") -> "asyncio.Future[Any]":
        """Cancel `task` together with the scope; finished tasks drop out on their own."""
        if self.closed:
            task.cancel()
            return task
        self._timers.append(task)
        task.add_done_callback(self._discard_timer)
        return task

    def add_voice(self, voice: Voice) -> None:
        if self.closed:
            voice.stop()
            return
        self._voices.append(voice)

    def release_voice(self, voice: Voice) -> None:
        if voice in self._voices:
            self._voices.remove(voice)
        self._close_if_drained()

    def child(self) -> "CancellationScope":
        """Create a nested scope that is stopped whenever this one is."""
        scope = CancellationScope(self.clock, parent=self)
        if self.closed:
            scope.closed = True
        else:
            self._children.append(scope)
        return scope

    def _discard_timer(self, timer: Any) -> None:
        if timer in self._timers:
            self._timers.remove(timer)
        self._close_if_drained()

    def release(self) -> None:
        """Let running timers and voices end on their own, then close."""
        self._draining = True
        self._close_if_drained()

    def _close_if_drained(self) -> None:
        if self._draining and not self.closed and self.pending == 0:
            self.close()

    def stop_all(self) -> None:
        """Cancel every timer and stop every voice, including those of child scopes.

        Safe to call at any time, including when nothing is active. The scope
        stays usable afterwards; child scopes are closed for good.
        """
        children, self._children = self._children, []
        for scope in children:
            scope._parent = None
            scope.close()

        timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()

        voices, self._voices = self._voices, []
        for voice in voices:
            try:
                voice.stop()
            except Exception as e:
                logger.debug(f"Failed to stop voice: {e}")

    def close(self) -> None:
        """Stop everything and refuse new work. Idempotent."""
        if self.closed:
            return
        self._draining = False
        self.stop_all()
        self.closed = True
        if self._parent is not None:
            self._parent._forget_child(self)
            self._parent = None

    def _forget_child(self, scope: "CancellationScope") -> None:
        if scope in self._children:
            self._children.remove(scope)

    @property
    def pending_timers(self) -> int:
        return len(self._timers) + sum(c.pending_timers for c in self._children)

    @property
    def active_voices(self) -> int:
        return len(self._voices) + sum(c.active_voices for c in self._children)

    @property
    def pending(self) -> int:
        """Number of live timers, tasks and voices in this scope and its children."""
        return self.pending_timers + self.active_voices
