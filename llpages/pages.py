"""Page indexes and the record of how many pages each allocation spans."""

from __future__ import annotations

import threading
from dataclasses import dataclass

_SLOTS = 512
_MAX_SLOT = 255
_MAX_PAGES = 2 * _MAX_SLOT + 1


@dataclass(frozen=True, order=True)
class PageIndex:
    """The index of a page within a huge page; never zero."""

    value: int

    def __post_init__(self) -> None:
        if self.value <= 0:
            raise ValueError(f"a page index must be positive, got {self.value}")

    def __int__(self) -> int:
        return self.value


def _index_value(index: PageIndex | int) -> int:
    value = index.value if isinstance(index, PageIndex) else PageIndex(index).value
    if value >= _SLOTS:
        raise IndexError(f"page index {value} is out of bounds (< {_SLOTS})")
    return value


class PageSizes:
    """Number of pages of the allocation starting at each page index.

    A size is stored with an implicit +1, so a fresh slot reads as a single page.
    Sizes above 256 spill into the following slot: 255 marks the overflow, and the
    next slot holds the size minus 256.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._slots = bytearray(_SLOTS)

    def get(self, index: PageIndex | int) -> int:
        """Return the number of pages allocated from ``index``."""
        at = _index_value(index)
        with self._lock:
            stored = self._slots[at]
            if stored == _MAX_SLOT:
                if at + 1 >= _SLOTS:
                    raise IndexError(f"overflow slot after index {at} is out of bounds")
                return 256 + self._slots[at + 1]
            return stored + 1

    def set(self, index: PageIndex | int, number_pages: int) -> None:
        """Record that ``number_pages`` pages are allocated from ``index``."""
        at = _index_value(index)
        if not 1 <= number_pages <= _MAX_PAGES:
            raise ValueError(
                f"number of pages must be within 1..={_MAX_PAGES}, got {number_pages}"
            )
        with self._lock:
            if number_pages <= 256:
                self._slots[at] = number_pages - 1
                return
            if at + 1 >= _SLOTS:
                raise IndexError(f"overflow slot after index {at} is out of bounds")
            self._slots[at] = _MAX_SLOT
            self._slots[at + 1] = number_pages - 256

    def unset(self, index: PageIndex | int, number_pages: int) -> None:
        """Forget the allocation of ``number_pages`` pages recorded at ``index``."""
        at = _index_value(index)
        if not 1 <= number_pages <= _MAX_PAGES:
            raise ValueError(
                f"number of pages must be within 1..={_MAX_PAGES}, got {number_pages}"
            )
        with self._lock:
            self._slots[at] = 0
            if number_pages > 256:
                if at + 1 >= _SLOTS:
                    raise IndexError(f"overflow slot after index {at} is out of bounds")
                self._slots[at + 1] = 0