"""
Throttle Module
===============

Rate limiting for pointer-move sampling.

Semantics (same as the host platform's throttle helper):
- A call outside a window runs immediately and opens a window of `period`
- Calls inside the window are coalesced: only the latest arguments are kept
- At the window boundary the pending call (if any) runs and opens a new window
- cancel() drops the pending call and closes the window

Time is injected through a Scheduler, so the component runs without a
live map and is driven by a manual clock in tests.
"""

from typing import Any, Callable, Optional, Protocol, Tuple


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Protocol for deferred execution (interface)."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Run callback once after delay seconds."""
        ...


class Throttle:
    """
    Trailing-edge throttle around a callable.

    Usage:
        sampler = Throttle(on_move, period=0.05, scheduler=host)
        host.on("mousemove", sampler)
        ...
        sampler.cancel()
    """

    def __init__(self, func: Callable[..., Any], period: float, scheduler: Scheduler):
        """
        Args:
            func: Callable to rate limit
            period: Window length in seconds
            scheduler: Source of deferred calls
        """
        if period <= 0:
            raise ValueError(f"period must be > 0, got {period}")

        self._func = func
        self._period = period
        self._scheduler = scheduler

        self._timer: Optional[TimerHandle] = None
        self._pending: Optional[Tuple[tuple, dict]] = None

    @property
    def locked(self) -> bool:
        """True while a window is open."""
        return self._timer is not None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        if self.locked:
            self._pending = (args, kwargs)
            return
        self._run(args, kwargs)

    def _run(self, args: tuple, kwargs: dict) -> None:
        self._timer = self._scheduler.call_later(self._period, self._on_window_end)
        self._func(*args, **kwargs)

    def _on_window_end(self) -> None:
        self._timer = None
        if self._pending is not None:
            args, kwargs = self._pending
            self._pending = None
            self._run(args, kwargs)

    def cancel(self) -> None:
        """Drop the pending call and close the current window."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending = None

    def __repr__(self) -> str:
        return f"Throttle(period={self._period}, locked={self.locked}, pending={self.has_pending})"
