"""Lazily fetched, cached instrument state.

Slow command channels make every round-trip expensive. A :class:`LazyCache`
holds one piece of instrument state and only asks the instrument for it
when no valid value is held (or caching is disabled).

The owner supplies a *fetcher*: any object with a ``fetch()`` method that
queries the instrument. The cache owns the value and its validity flag.

Example:
    >>> class DepthFetcher:
    ...     def fetch(self) -> int:
    ...         return 4000
    >>> depth = LazyCache(DepthFetcher())
    >>> depth.get()
    4000
"""

from __future__ import annotations

from typing import Generic, Protocol, TypeVar

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Fetcher(Protocol[T_co]):
    """Capability that reads a value from the instrument."""

    def fetch(self) -> T_co:
        """Query the instrument and return the current value."""
        ...


class LazyCache(Generic[T]):
    """Memoized value backed by a fetch capability.

    If the cache is disabled or holds no valid value, :meth:`get` calls the
    fetcher, stores the result and marks it valid. :meth:`set` stores a value
    without calling the fetcher. Errors raised by the fetcher propagate
    unchanged and leave the cache invalid.

    Not thread-safe; drivers access their caches from one control thread.

    Args:
        fetcher: Object whose ``fetch()`` reads the value from the instrument.
        enabled: If False, every :meth:`get` calls the fetcher.
    """

    def __init__(self, fetcher: Fetcher[T], *, enabled: bool = True) -> None:
        self._fetcher = fetcher
        self._enabled = enabled
        self._valid = False
        self._value: T | None = None

    @property
    def enabled(self) -> bool:
        """Whether cached values are returned without re-fetching."""
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    @property
    def valid(self) -> bool:
        """Whether a value has been fetched or set since the last invalidation."""
        return self._valid

    def get(self) -> T:
        """Return the cached value, fetching it first when required.

        Returns:
            The cached or freshly fetched value.
        """
        if not self._enabled or not self._valid:
            self._value = self._fetcher.fetch()
            self._valid = True
        return self._value  # type: ignore[return-value]

    def set(self, value: T) -> None:
        """Store a value known to match the instrument state.

        Args:
            value: The new value.
        """
        self._value = value
        self._valid = True

    def invalidate(self) -> None:
        """Force the next :meth:`get` to query the instrument."""
        self._valid = False
