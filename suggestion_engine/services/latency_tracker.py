"""
Rolling latency history for suggestion calls.
"""

from collections import deque
from typing import List, Optional


class LatencyTracker:
    """
    Keeps the most recent suggestion call latencies in a fixed-size window.

    The tracker is purely observational: it annotates what is shown to the
    user and never gates control flow.
    """

    def __init__(self, capacity: int = 10):
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")

        self.capacity = capacity
        self._samples = deque(maxlen=capacity)

    def record(self, latency_ms: float) -> None:
        """Push a sample; the oldest sample drops when the window is full."""
        if latency_ms < 0:
            raise ValueError(f"latency_ms must be non-negative, got {latency_ms}")

        self._samples.append(float(latency_ms))

    def average(self) -> Optional[float]:
        """Arithmetic mean of the window, or None if empty."""
        if not self._samples:
            return None

        return sum(self._samples) / len(self._samples)

    def last(self) -> Optional[float]:
        if not self._samples:
            return None

        return self._samples[-1]

    def samples(self) -> List[float]:
        return list(self._samples)

    def clear(self) -> None:
        self._samples.clear()

    def __len__(self) -> int:
        return len(self._samples)
