"""Cancellable countdown timers driven by the host clock.

Stations never schedule wall-clock callbacks.  Each owns :class:`Timer`
objects which :func:`advance_timers` walks forward in time order, so a timer
cancelled by an earlier callback never fires afterwards.
"""
from __future__ import annotations

from typing import Callable, Iterable, List, Optional

EPSILON = 1e-9


class Timer:
    """A repeating (or one-shot) countdown owned by a single station."""

    def __init__(self, interval: float, callback: Callable[[], None], *, repeat: bool = True) -> None:
        self.interval = float(interval)
        self.callback = callback
        self.repeat = repeat
        self.active = False
        self.remaining = self.interval

    def start(self, delay: Optional[float] = None) -> None:
        self.active = True
        self.remaining = self.interval if delay is None else float(delay)

    def cancel(self) -> None:
        self.active = False
        self.remaining = self.interval

    @property
    def due(self) -> bool:
        return self.active and self.remaining <= EPSILON

    def advance(self, step: float) -> None:
        if self.active:
            self.remaining -= step

    def fire(self) -> None:
        if not self.due:
            return
        if self.repeat:
            self.remaining += self.interval
        else:
            self.active = False
        self.callback()


def advance_timers(timers_of: Callable[[], Iterable[Timer]], dt: float) -> float:
    """Advance every active timer by ``dt``, firing each tick in time order.

    ``timers_of`` is re-queried after every sub-step because callbacks may
    start or cancel timers, or replace the station that owns them.  Timers due
    at the same instant fire in the order ``timers_of`` lists them.  Returns
    the amount of time consumed (always ``dt`` for non-negative input).
    """
    if dt <= 0:
        return 0.0
    remaining = float(dt)
    while remaining > EPSILON:
        active: List[Timer] = [t for t in timers_of() if t.active]
        step = min([remaining] + [max(0.0, t.remaining) for t in active])
        for timer in active:
            timer.advance(step)
        remaining -= step
        for timer in list(timers_of()):
            timer.fire()
    return float(dt)
