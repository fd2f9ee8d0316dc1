"""Debounce – single-slot restartable timer on the running event loop."""
from __future__ import annotations

import asyncio
from typing import Any, Callable


class DebounceTimer:
    """Fire *callback* once input has been quiet for ``delay_ms``.

    At most one call is pending at any instant: :meth:`schedule` cancels the
    pending call before arming a new one. A disposed timer refuses to arm.
    """

    def __init__(self, delay_ms: float, callback: Callable[..., Any]) -> None:
        if delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")
        self._delay = delay_ms / 1000
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._args: tuple[Any, ...] = ()
        self._disposed = False

    @property
    def delay_ms(self) -> float:
        return self._delay * 1000

    @property
    def pending(self) -> bool:
        return self._handle is not None

    @property
    def disposed(self) -> bool:
        return self._disposed

    def schedule(self, *args: Any) -> None:
        """Cancel any pending call and restart the quiet window."""
        if self._disposed:
            raise RuntimeError("DebounceTimer has been disposed")
        self.cancel()
        loop = asyncio.get_running_loop()
        self._args = args
        self._handle = loop.call_later(self._delay, self._fire)

    def cancel(self) -> bool:
        """Drop the pending call, if any. Returns whether one was pending."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._handle = None
        self._args = ()
        return True

    def flush(self) -> bool:
        """Run the pending call now instead of waiting for the window."""
        if self._handle is None:
            return False
        self._handle.cancel()
        self._fire()
        return True

    def dispose(self) -> None:
        self.cancel()
        self._disposed = True

    def _fire(self) -> None:
        args, self._args = self._args, ()
        self._handle = None
        self._callback(*args)


__all__ = ["DebounceTimer"]
