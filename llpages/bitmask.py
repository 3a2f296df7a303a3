"""A 64-bit mask whose bits mark slots as claimed (1) or free (0), safe to share between threads."""

from __future__ import annotations

import threading

CAPACITY = 64
_FULL = (1 << CAPACITY) - 1


def low_mask(number: int) -> int:
    """Return a 64-bit mask with the ``number`` lowest bits set."""
    if not 0 <= number <= CAPACITY:
        raise ValueError(f"number of bits must be within 0..={CAPACITY}, got {number}")
    return (1 << number) - 1


def high_mask(number: int) -> int:
    """Return a 64-bit mask with the ``number`` highest bits set."""
    if not 0 <= number <= CAPACITY:
        raise ValueError(f"number of bits must be within 0..={CAPACITY}, got {number}")
    return ~low_mask(CAPACITY - number) & _FULL


def _trailing_zeros(value: int) -> int:
    if value == 0:
        return CAPACITY
    return (value & -value).bit_length() - 1


def _check_align(align: int) -> None:
    if align <= 0 or align & (align - 1):
        raise ValueError(f"alignment must be a power of 2, got {align}")


def _round_down(value: int, align: int) -> int:
    return value & ~(align - 1)


class AtomicBitMask:
    """Sixty-four slots, each claimed (bit set) or free (bit clear)."""

    CAPACITY = CAPACITY

    def __init__(self, mask: int = 0) -> None:
        self._lock = threading.Lock()
        self._mask = mask & _FULL

    def __repr__(self) -> str:
        return f"AtomicBitMask({self.load():#066b})"

    def initialize(self, mask: int) -> None:
        """Overwrite the whole mask."""
        with self._lock:
            self._mask = mask & _FULL

    def load(self) -> int:
        """Return the current mask."""
        with self._lock:
            return self._mask

    def claim_single(self) -> int | None:
        """Claim the lowest free bit and return its index, or None if all bits are claimed."""
        while True:
            current = self.load()
            candidate = _trailing_zeros(~current & _FULL)
            if candidate == CAPACITY:
                return None
            candidate_mask = 1 << candidate
            if self._fetch_or(candidate_mask) & candidate_mask == 0:
                return candidate

    def claim_multiple(self, number: int, align: int = 1) -> tuple[int, int] | None:
        """Claim up to ``number`` consecutive bits, searching from the highest bits down.

        Returns ``(index, count)`` of the lowest claimed bit and the number claimed, or None.
        When fewer than ``number`` bits are claimed the index is 0, so that the claim can be
        extended into a preceding mask. Claimed indexes are multiples of ``align``.
        """
        _check_align(align)
        if number < 1:
            raise ValueError(f"number of bits must be at least 1, got {number}")

        progress_mask = 0
        while True:
            current = self.load() | progress_mask
            potential = (~current & _FULL).bit_length()
            if potential < number:
                break

            candidate = _round_down(potential - number, align)
            candidate_mask = low_mask(number) << candidate

            if current & candidate_mask == 0 and self._claim(candidate_mask):
                return candidate, number

            # Discard the bits already examined, so that the scan always progresses.
            progress_mask = high_mask(CAPACITY - potential + 1)

        current = self.load()
        potential = _round_down(_trailing_zeros(current), align)
        if potential == 0:
            return None
        if self._claim(low_mask(potential)):
            return 0, potential
        return None

    def claim_at(self, inner: int, number: int) -> bool:
        """Claim exactly ``number`` bits starting at ``inner``; return whether it succeeded."""
        if inner < 0 or inner + number > CAPACITY:
            raise ValueError(f"bits {inner}..{inner + number} fall outside the mask")
        return self._claim(low_mask(number) << inner)

    def release_single(self, inner: int) -> None:
        """Release the bit at ``inner``."""
        if not 0 <= inner < CAPACITY:
            raise ValueError(f"bit index must be within 0..{CAPACITY}, got {inner}")
        self._release(1 << inner)

    def release_multiple(self, inner: int, number: int) -> None:
        """Release ``number`` bits starting at ``inner``."""
        if inner < 0 or inner + number > CAPACITY:
            raise ValueError(f"bits {inner}..{inner + number} fall outside the mask")
        self._release(low_mask(number) << inner)

    def _fetch_or(self, mask: int) -> int:
        with self._lock:
            before = self._mask
            self._mask = before | mask
            return before

    def _claim(self, mask: int) -> bool:
        before = self._fetch_or(mask)
        if before & mask == 0:
            return True
        # Undo the bits that this attempt set but did not own before.
        if before & mask != mask:
            self._release(~before & mask)
        return False

    def _release(self, mask: int) -> None:
        with self._lock:
            before = self._mask
            if before & mask != mask:
                raise ValueError(
                    f"releasing unclaimed bits: before {before:b}, mask {mask:b}"
                )
            self._mask = before & ~mask