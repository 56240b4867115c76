"""Per-key monotonic counters for SEQUENCE elements.

Counters are maintained in CounterState.next_value, keyed by whatever owns
the format (an inventory id, for instance). Increments are serialized with a
lock so two concurrent callers never receive the same value.
"""

from __future__ import annotations

import threading

from customid.core.models import CounterState


class SequenceCounter:
    """Hands out counter values backed by CounterState."""

    def __init__(self, state: CounterState | None = None) -> None:
        self._state = state if state is not None else CounterState()
        self._lock = threading.Lock()

    @property
    def state(self) -> CounterState:
        return self._state

    def next_value(self, key: str) -> int:
        """Return the next value for *key* and advance the counter.

        Example: next_value("inv-1") -> 1, 2, 3, ...
        """
        with self._lock:
            current = self._state.next_value.get(key, 1)
            self._state.next_value[key] = current + 1
            return current

    def peek(self, key: str) -> int:
        """Return the last value handed out for *key* (0 if none yet)."""
        with self._lock:
            return self._state.next_value.get(key, 1) - 1
