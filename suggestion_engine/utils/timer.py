"""
Resettable timer for debounce, pause detection and auto-hide.

This module provides an owned, cancellable timer built on the asyncio
event loop. Each timer holds at most one armed handle; arming again
replaces the previous handle.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional, Set

logger = logging.getLogger(__name__)


class ResettableTimer:
    """
    Single-shot timer that can be re-armed or cancelled.

    When the timer fires, the callback is invoked on the event loop. If the
    callback returns an awaitable, it is scheduled as a detached task that
    the timer keeps track of. Re-arming or cancelling the timer never
    cancels such a task: once a timer has fired, the work it started runs
    to completion.

    Attributes:
        name: Timer name used in log messages
    """

    def __init__(self, name: str):
        """
        Initialize timer.

        Args:
            name: Timer name used in log messages
        """
        self.name = name
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    def arm(self, delay_seconds: float, callback: Callable[..., Any], *args: Any) -> None:
        """
        Arm the timer, replacing any previously armed handle.

        Must be called from a running event loop.

        Args:
            delay_seconds: Delay before the callback fires
            callback: Function or coroutine function to invoke
            *args: Positional arguments passed to the callback
        """
        self.cancel()

        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay_seconds, self._fire, callback, args)

    def cancel(self) -> bool:
        """
        Cancel the armed handle, if any.

        Returns:
            True if an armed handle was cancelled
        """
        if self._handle is None:
            return False

        self._handle.cancel()
        self._handle = None
        return True

    @property
    def is_armed(self) -> bool:
        """Whether a handle is waiting to fire."""
        return self._handle is not None

    @property
    def running_tasks(self) -> int:
        """Number of detached tasks started by this timer that are still running."""
        return len(self._tasks)

    def cancel_tasks(self) -> None:
        """Cancel the armed handle and every detached task. Used on shutdown."""
        self.cancel()
        for task in list(self._tasks):
            task.cancel()

    def _fire(self, callback: Callable[..., Any], args: tuple) -> None:
        self._handle = None

        try:
            result = callback(*args)
        except Exception as e:
            logger.error(f"Timer '{self.name}' callback failed: {e}", exc_info=True)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)

        if task.cancelled():
            return

        error = task.exception()
        if error is not None:
            logger.error(
                f"Timer '{self.name}' task failed: {error}",
                exc_info=error
            )
