"""Timer scheduling on top of the asyncio event loop"""

import asyncio
from typing import Callable, Protocol, Set


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay in seconds"""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class AsyncioScheduler:
    """Schedules callbacks on the running event loop"""

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


class Interval:
    """
    Repeating timer: invokes callback every `period` seconds until cancelled.

    The next run is armed before the callback executes, so a callback that
    raises does not stop the interval.
    """

    def __init__(self, scheduler: Scheduler, period: float, callback: Callable[[], None]):
        self._scheduler = scheduler
        self._period = period
        self._callback = callback
        self._handle: Cancellable | None = None
        self._cancelled = False
        self._arm()

    def _arm(self) -> None:
        self._handle = self._scheduler.call_later(self._period, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._arm()
        self._callback()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class ScopedScheduler:
    """
    Scheduler that remembers every handle it hands out.

    `cancel_all()` cancels everything still pending, which is how session
    teardown guarantees no timer fires afterwards.
    """

    def __init__(self, scheduler: Scheduler):
        self._scheduler = scheduler
        self._handles: Set["_ScopedHandle"] = set()
        self._closed = False

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        scoped = _ScopedHandle(self)
        if self._closed:
            # Scope torn down: hand back a handle that never fires
            return scoped

        def run() -> None:
            self._handles.discard(scoped)
            callback()

        scoped.inner = self._scheduler.call_later(delay, run)
        self._handles.add(scoped)
        return scoped

    def every(self, period: float, callback: Callable[[], None]) -> Interval:
        return Interval(self, period, callback)

    @property
    def pending(self) -> int:
        return len(self._handles)

    def cancel_all(self) -> None:
        self._closed = True
        for handle in list(self._handles):
            handle.cancel()


class _ScopedHandle:
    def __init__(self, scope: ScopedScheduler):
        self._scope = scope
        self.inner: Cancellable | None = None

    def cancel(self) -> None:
        self._scope._handles.discard(self)
        if self.inner is not None:
            self.inner.cancel()
