"""
Registry of in-flight suggestion calls.

This module provides the PendingCallRegistry class that coalesces
concurrent suggestion requests for the same normalized text into one
shared asyncio task.
"""

import asyncio
import json
import logging
from typing import Awaitable, Callable, Dict

from suggestion_engine.exceptions import RegistryInvariantError
from suggestion_engine.models import CacheEntry

logger = logging.getLogger(__name__)


class PendingCallRegistry:
    """
    Tracks outstanding suggestion calls keyed by normalized text.

    At most one task exists per key. Each task removes its own registry
    entry in a finally block when it settles, whether it succeeded, failed
    or was cancelled, so a raised error cannot leak a pending entry.

    Callers that await a shared task should do so through asyncio.shield,
    otherwise cancelling one awaiter cancels the call for every awaiter.

    Attributes:
        strict: Raise RegistryInvariantError instead of recovering when a
            settled task is found in the registry
    """

    def __init__(self, strict: bool = False):
        """
        Initialize registry.

        Args:
            strict: Treat invariant violations as fatal
        """
        self.strict = strict
        self._pending: Dict[str, asyncio.Task] = {}
        self.started_count = 0
        self.joined_count = 0

    def begin_or_join(
        self,
        key: str,
        start_fn: Callable[[], Awaitable[CacheEntry]]
    ) -> 'asyncio.Task[CacheEntry]':
        """
        Return the outstanding task for key, or start a new one.

        Must be called from a running event loop.

        Args:
            key: Normalized transcript key
            start_fn: Factory returning the awaitable that performs the call

        Returns:
            Task resolving to the CacheEntry for key

        Raises:
            RegistryInvariantError: In strict mode, if a settled task is
                still registered for key
        """
        task = self._pending.get(key)

        if task is not None:
            if not task.done():
                self.joined_count += 1
                logger.debug(f"Joining pending call for key: {key[:50]}")
                return task

            logger.error(json.dumps({
                'event': 'registry_invariant_violation',
                'key_preview': key[:50],
                'action': 'raise' if self.strict else 'start_new_call'
            }))

            if self.strict:
                raise RegistryInvariantError(
                    f"Settled task still registered for key '{key[:50]}'"
                )

            del self._pending[key]

        task = asyncio.ensure_future(self._run(key, start_fn))
        self._pending[key] = task
        self.started_count += 1

        logger.debug(f"Started call for key: {key[:50]} (pending: {len(self._pending)})")

        return task

    async def _run(
        self,
        key: str,
        start_fn: Callable[[], Awaitable[CacheEntry]]
    ) -> CacheEntry:
        try:
            return await start_fn()
        finally:
            # Only remove the entry if it still belongs to this task; clear()
            # may have let a newer call take the key.
            if self._pending.get(key) is asyncio.current_task():
                del self._pending[key]

    def is_pending(self, key: str) -> bool:
        """Whether a call for key is outstanding."""
        task = self._pending.get(key)
        return task is not None and not task.done()

    def pending_count(self) -> int:
        """Number of outstanding calls."""
        return len(self._pending)

    def clear(self) -> None:
        """
        Forget every registered call without cancelling it.

        The forgotten tasks keep running and populate the cache when they
        complete.
        """
        self._pending.clear()

    def cancel_all(self) -> None:
        """Cancel every outstanding call. Used on shutdown."""
        for task in list(self._pending.values()):
            task.cancel()
        self._pending.clear()

    def get_statistics(self) -> dict:
        """
        Get registry statistics.

        Returns:
            Dictionary with started, joined and pending counts
        """
        return {
            'started_count': self.started_count,
            'joined_count': self.joined_count,
            'pending_count': len(self._pending)
        }
