"""Inactivity timer: countdown to automatic logout"""

import logging
from typing import Callable

from transfer_desk.config import settings
from transfer_desk.session.activity import RECOGNIZED_EVENTS, ActivitySource
from transfer_desk.utils.formatters import format_time
from transfer_desk.utils.scheduler import Cancellable, Interval, Scheduler

TICK_SECONDS = 1


class InactivityTimer:
    """
    Fires `on_timeout` once the user has been idle for `threshold_seconds`.

    Lifecycle:
    - start(): subscribe to activity events, arm the deadline and the 1s tick
    - any recognized activity: deadline pushed out by the full threshold,
      time_remaining back to the threshold
    - deadline: time_remaining forced to 0, timer deactivates, callback fires
    - stop(): unsubscribe and cancel both timers (safe to call repeatedly)
    """

    def __init__(
        self,
        on_timeout: Callable[[], None],
        scheduler: Scheduler,
        activity: ActivitySource,
        threshold_seconds: int | None = None,
    ):
        self._on_timeout = on_timeout
        self._scheduler = scheduler
        self._activity = activity
        self._threshold = (
            threshold_seconds if threshold_seconds is not None else settings.inactivity_timeout_seconds
        )
        self._time_remaining = self._threshold
        self._deadline: Cancellable | None = None
        self._tick: Interval | None = None
        self._active = False
        self._fired = False

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def time_remaining(self) -> int:
        return self._time_remaining

    @property
    def active(self) -> bool:
        return self._active

    @property
    def fired(self) -> bool:
        return self._fired

    def display(self) -> str:
        return format_time(self._time_remaining)

    def start(self) -> None:
        if self._active:
            return
        self._active = True
        self._fired = False
        for event in RECOGNIZED_EVENTS:
            self._activity.add_listener(event, self._on_activity)
        self._reset()

    def stop(self) -> None:
        if self._active:
            for event in RECOGNIZED_EVENTS:
                self._activity.remove_listener(event, self._on_activity)
        self._active = False
        self._cancel_timers()

    def reconfigure(
        self,
        on_timeout: Callable[[], None] | None = None,
        threshold_seconds: int | None = None,
    ) -> None:
        """Swap the callback and/or threshold; an active countdown restarts from scratch"""
        if on_timeout is not None:
            self._on_timeout = on_timeout
        if threshold_seconds is not None:
            self._threshold = threshold_seconds

        if self._active:
            self._reset()
        else:
            self._time_remaining = self._threshold

    def _on_activity(self, event: str) -> None:
        if self._active:
            self._reset()

    def _reset(self) -> None:
        self._cancel_timers()
        self._time_remaining = self._threshold
        self._deadline = self._scheduler.call_later(self._threshold, self._expire)
        self._tick = Interval(self._scheduler, TICK_SECONDS, self._countdown)

    def _countdown(self) -> None:
        if self._time_remaining <= 1:
            self._time_remaining = 0
            if self._tick is not None:
                self._tick.cancel()
            return
        self._time_remaining -= 1

    def _expire(self) -> None:
        self._deadline = None
        if not self._active:
            return

        self._time_remaining = 0
        self._fired = True
        self.stop()
        logging.info("Inactivity threshold reached", extra={"threshold_seconds": self._threshold})
        self._on_timeout()

    def _cancel_timers(self) -> None:
        if self._deadline is not None:
            self._deadline.cancel()
            self._deadline = None
        if self._tick is not None:
            self._tick.cancel()
            self._tick = None
