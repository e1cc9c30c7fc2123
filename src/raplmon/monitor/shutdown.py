"""Interrupt-driven shutdown request.

The signal handler only flips a threading.Event; the loop controller
observes it between cycles.
"""

from __future__ import annotations

import signal
import threading
from collections.abc import Callable, Iterable
from types import FrameType
from typing import Any

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownFlag:
    """One-shot shutdown request shared by a signal handler and the loop."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self.signal_number: int | None = None

    def request(self, signal_number: int | None = None) -> None:
        """Request shutdown. Safe to call from a signal handler."""
        if self.signal_number is None:
            self.signal_number = signal_number
        self._event.set()

    @property
    def requested(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds, returning early once requested.

        Returns:
            True if shutdown has been requested.
        """
        return self._event.wait(timeout)


def install_interrupt_handler(
    flag: ShutdownFlag, signals: Iterable[int] = DEFAULT_SIGNALS
) -> Callable[[], None]:
    """Route the given signals to ``flag.request``.

    Must be called from the main thread.

    Returns:
        Callable that restores the previous handlers.
    """

    def _handler(signum: int, frame: FrameType | None) -> None:
        flag.request(signum)

    previous: dict[int, Any] = {}
    for signum in signals:
        previous[signum] = signal.signal(signum, _handler)

    def restore() -> None:
        for signum, handler in previous.items():
            # None means the handler was not installed from Python
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)

    return restore
