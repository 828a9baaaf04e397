"""Thread-safe queue of acquired waveform sets.

The acquisition path (often a polling thread) pushes waveform sets while the
host framework pops or drains them. Every access takes the queue lock.
"""

from __future__ import annotations

import threading
from collections import deque

from hdslab_core.types.waveform import WaveformSet


class PendingWaveformQueue:
    """FIFO of waveform sets awaiting consumption.

    Example:
        >>> queue = PendingWaveformQueue()
        >>> queue.push({})
        >>> len(queue)
        1
        >>> queue.pop()
        {}
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: deque[WaveformSet] = deque()

    def push(self, waveforms: WaveformSet) -> None:
        """Append a waveform set to the end of the queue."""
        with self._lock:
            self._items.append(waveforms)

    def pop(self) -> WaveformSet | None:
        """Remove and return the oldest waveform set, or None if empty."""
        with self._lock:
            if not self._items:
                return None
            return self._items.popleft()

    def drain(self) -> list[WaveformSet]:
        """Remove and return every queued waveform set, oldest first."""
        with self._lock:
            items = list(self._items)
            self._items.clear()
            return items

    def clear(self) -> None:
        """Discard every queued waveform set."""
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
