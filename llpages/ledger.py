"""Per-worker bookkeeping of bits claimed and released on a shared bit mask."""

from __future__ import annotations

import threading

from llpages.bitmask import CAPACITY, low_mask

_FULL = (1 << CAPACITY) - 1


def _check_mask(mask: int) -> None:
    if not 0 <= mask <= _FULL:
        raise ValueError(f"mask must fit in {CAPACITY} bits, got {mask:#x}")


def mask_to_range(mask: int) -> range:
    """Return the range of bit indexes covered by a contiguous ``mask``.

    An empty mask gives an empty range; a mask with gaps is rejected.
    """
    _check_mask(mask)
    if mask == 0:
        return range(0, 0)
    start = (mask & -mask).bit_length() - 1
    stop = mask.bit_length()
    if bin(mask).count("1") != stop - start:
        raise ValueError(f"mask {mask:b} is not a contiguous run of bits")
    return range(start, stop)


def range_to_mask(start: int, stop: int) -> int:
    """Return the mask with bits ``start`` (inclusive) to ``stop`` (exclusive) set."""
    if not 0 <= start <= stop <= CAPACITY:
        raise ValueError(f"bit range {start}..{stop} falls outside 0..{CAPACITY}")
    return low_mask(stop - start) << start


class ClaimLedger:
    """Records, per worker, the mask each one claimed and released."""

    def __init__(self, workers: int) -> None:
        if workers < 1:
            raise ValueError(f"a ledger needs at least one worker, got {workers}")
        self._lock = threading.Lock()
        self._claimed = [0] * workers
        self._released = [0] * workers

    def __len__(self) -> int:
        return len(self._claimed)

    def reset(self, worker: int) -> None:
        """Forget what ``worker`` claimed and released."""
        with self._lock:
            self._claimed[worker] = 0
            self._released[worker] = 0

    def record_claim(self, worker: int, mask: int) -> None:
        """Record that ``worker`` claimed the bits of ``mask``."""
        _check_mask(mask)
        with self._lock:
            self._claimed[worker] = mask

    def record_release(self, worker: int, mask: int) -> None:
        """Record that ``worker`` released the bits of ``mask``."""
        _check_mask(mask)
        with self._lock:
            self._released[worker] = mask

    def claimed_mask(self) -> int:
        """Return the combined claims; claims are expected not to overlap."""
        with self._lock:
            return sum(self._claimed)

    def released_mask(self) -> int:
        """Return the combined releases; releases are expected not to overlap."""
        with self._lock:
            return sum(self._released)

    def claimed_exact(self) -> list[int]:
        """Return the non-empty claims, sorted."""
        with self._lock:
            return sorted(mask for mask in self._claimed if mask)

    def released_exact(self) -> list[int]:
        """Return the non-empty releases, sorted."""
        with self._lock:
            return sorted(mask for mask in self._released if mask)

    def claimed_ranges(self) -> list[range]:
        """Return the bit range each worker claimed, in worker order."""
        with self._lock:
            claims = list(self._claimed)
        return [mask_to_range(mask) for mask in claims]