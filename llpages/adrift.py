"""The adrift marker of a page: a counter that is odd while adrift and even while anchored."""

from __future__ import annotations

import threading


class Adrift:
    """Tracks whether a full page has been cast adrift.

    A page that is full is cast adrift rather than listed anywhere, and caught back
    once enough of its blocks are freed. A generation counter, rather than a flag,
    guards against ABA: even values mean anchored, odd values mean adrift.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value = 0

    def __repr__(self) -> str:
        return f"Adrift({self.value()})"

    def is_adrift(self) -> int | None:
        """Return the current generation if adrift, otherwise None."""
        with self._lock:
            current = self._value
        return current if current % 2 else None

    def cast_adrift(self) -> int:
        """Cast the page adrift and return the new generation."""
        with self._lock:
            if self._value % 2:
                raise RuntimeError(f"already adrift at generation {self._value}")
            self._value += 1
            return self._value

    def catch(self, current: int) -> bool:
        """Anchor the page if it is still adrift at generation ``current``."""
        if current % 2 == 0:
            raise ValueError(f"generation {current} is not an adrift generation")
        with self._lock:
            if self._value != current:
                return False
            self._value = current + 1
            return True

    def value(self) -> int:
        """Return the raw generation counter."""
        with self._lock:
            return self._value