"""
Cooldown countdown.

Counts whole seconds from a starting duration down to zero, one tick per
interval. Restarting replaces the running countdown; at most one scheduled
tick is pending at any time, so a replaced or cancelled countdown can never
tick again.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from reviewbot.app.cooldown.scheduler import Handle, Scheduler
from reviewbot.app.models import CooldownState
from reviewbot.app.observability import event, gauge

logger = logging.getLogger(__name__)

TickListener = Callable[[CooldownState], None]
ExpiryListener = Callable[[], None]


class CooldownTimer:
    def __init__(
        self,
        scheduler: Scheduler,
        *,
        on_tick: Optional[TickListener] = None,
        on_expire: Optional[ExpiryListener] = None,
        interval_seconds: float = 1.0,
    ) -> None:
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._interval = interval_seconds
        self._remaining = 0
        self._duration = 0
        self._started_at = 0.0
        self._handle: Optional[Handle] = None

    @property
    def active(self) -> bool:
        return self._remaining > 0

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def state(self) -> CooldownState:
        return CooldownState.counting(self._remaining)

    def start(self, duration_seconds: int) -> None:
        if isinstance(duration_seconds, bool) or not isinstance(duration_seconds, int) or duration_seconds <= 0:
            raise ValueError(f"cooldown duration must be a positive integer, got {duration_seconds!r}")
        self._cancel_handle()
        self._remaining = duration_seconds
        self._duration = duration_seconds
        self._started_at = self._scheduler.time()
        self._schedule()
        event("cooldown.started", {"seconds": duration_seconds})

    def tick(self) -> None:
        if not self.active:
            return
        self._remaining -= 1
        gauge("cooldown.remaining_seconds", self._remaining)
        if self._on_tick is not None:
            self._on_tick(self.state)
        if self._remaining == 0:
            self.cancel()
            event("cooldown.expired", {})
            if self._on_expire is not None:
                self._on_expire()

    def cancel(self) -> None:
        self._cancel_handle()
        self._remaining = 0

    def _schedule(self) -> None:
        # tick k is due at start + k * interval, so late callbacks do not accumulate
        elapsed_ticks = self._duration - self._remaining
        due = self._started_at + (elapsed_ticks + 1) * self._interval
        delay = max(0.0, due - self._scheduler.time())
        self._handle = self._scheduler.call_later(delay, self._on_interval)

    def _on_interval(self) -> None:
        self._handle = None
        self.tick()
        if self.active and self._handle is None:
            self._schedule()

    def _cancel_handle(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


__all__ = ["CooldownTimer", "TickListener", "ExpiryListener"]
