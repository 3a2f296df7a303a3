"""Bitmap of which large pages of a huge page are free (0) or occupied (1)."""

from __future__ import annotations

from collections.abc import Sequence

from llpages.bitmask import CAPACITY, AtomicBitMask, low_mask
from llpages.pages import PageIndex

_MASKS = 8
_TOTAL = _MASKS * CAPACITY
_FULL = low_mask(CAPACITY)

# Masks to start from, per alignment expressed in whole masks, when the
# alignment spans at least one whole mask.
_ALIGNED_OUTERS = {
    1: (7, 6, 5, 4, 3, 2),
    2: (7, 5, 3),
    4: (7,),
}


def _index_value(index: PageIndex | int) -> int:
    value = index.value if isinstance(index, PageIndex) else PageIndex(index).value
    if value >= _TOTAL:
        raise IndexError(f"page index {value} is out of bounds (< {_TOTAL})")
    return value


def _check_align(align: int) -> None:
    if align <= 0 or align & (align - 1):
        raise ValueError(f"alignment must be a power of 2, got {align}")


def _to_page_index(value: int) -> PageIndex | None:
    return PageIndex(value) if value > 0 else None


def _split(inner: int, number_pages: int) -> tuple[int, int, int]:
    """Return the number of head bits, whole middle masks and tail bits of a span."""
    head_bits = CAPACITY - inner
    if head_bits >= number_pages:
        return number_pages, 0, 0
    rest = number_pages - head_bits
    return head_bits, rest // CAPACITY, rest % CAPACITY


class PageTokens:
    """Occupation of the 512 large pages of a huge page.

    The first page is always occupied by the huge page header; pages beyond
    ``number_pages`` are marked occupied as well.
    """

    CAPACITY = _TOTAL

    def __init__(self, number_pages: int) -> None:
        if not 0 <= number_pages < _TOTAL:
            raise ValueError(
                f"number of pages must be within 0..{_TOTAL}, got {number_pages}"
            )
        self._masks = [AtomicBitMask() for _ in range(_MASKS)]
        self._masks[0].initialize(1)

        trailing_ones = _TOTAL - 1 - number_pages
        index = _MASKS - 1
        while trailing_ones >= CAPACITY:
            self._masks[index].initialize(_FULL)
            trailing_ones -= CAPACITY
            index -= 1

        if trailing_ones > 0:
            zeroes = low_mask(CAPACITY - trailing_ones)
            ones = _FULL - zeroes + (0 if index > 0 else 1)
            self._masks[index].initialize(ones)

    @classmethod
    def from_masks(cls, masks: Sequence[int]) -> PageTokens:
        """Create tokens holding exactly the given eight masks."""
        masks = list(masks)
        if len(masks) != _MASKS:
            raise ValueError(f"expected {_MASKS} masks, got {len(masks)}")
        if masks[0] & 1 != 1:
            raise ValueError("the first page is reserved and must be marked occupied")
        tokens = cls(_TOTAL - 1)
        for bits, mask in zip(tokens._masks, masks):
            bits.initialize(mask)
        return tokens

    def __repr__(self) -> str:
        return f"PageTokens({', '.join(f'{mask:#x}' for mask in self.load())})"

    def load(self) -> tuple[int, ...]:
        """Return the eight masks, lowest pages first."""
        return tuple(bits.load() for bits in self._masks)

    def fast_allocate(self) -> PageIndex | None:
        """Allocate one page, the lowest free one; return its index or None."""
        for outer, bits in enumerate(self._masks):
            inner = bits.claim_single()
            if inner is not None:
                return _to_page_index(outer * CAPACITY + inner)
        return None

    def flexible_allocate(self, number_pages: int, align_pages: int = 1) -> PageIndex | None:
        """Allocate ``number_pages`` consecutive pages, searching from the highest pages.

        The returned index is a multiple of ``align_pages``; None if no room was found.
        """
        _check_align(align_pages)
        if number_pages < 1:
            raise ValueError(f"number of pages must be at least 1, got {number_pages}")
        if number_pages % align_pages:
            raise ValueError(
                f"number of pages {number_pages} is not a multiple of the alignment {align_pages}"
            )

        align_outer = align_pages // CAPACITY

        if align_outer == 0:
            outer = _MASKS - 1
            while outer >= 0:
                index, outer = self._allocate_backward_from(outer, number_pages, align_pages)
                if index is not None:
                    return index
            return None

        for outer in _ALIGNED_OUTERS.get(align_outer, ()):
            index, _ = self._allocate_backward_from(outer, number_pages, CAPACITY)
            if index is not None:
                return index
        return None

    def fast_deallocate(self, index: PageIndex | int) -> None:
        """Free the single page at ``index``."""
        outer, inner = divmod(_index_value(index), CAPACITY)
        self._masks[outer].release_single(inner)

    def flexible_deallocate(self, index: PageIndex | int, number_pages: int) -> None:
        """Free ``number_pages`` pages starting at ``index``."""
        outer, inner = divmod(_index_value(index), CAPACITY)
        if number_pages < 1:
            raise ValueError(f"number of pages must be at least 1, got {number_pages}")
        head_bits, middle, tail_bits = _split(inner, number_pages)
        last = outer + middle + (1 if tail_bits else 0)
        if last >= _MASKS:
            raise IndexError(
                f"pages {outer * CAPACITY + inner}..+{number_pages} fall outside the huge page"
            )

        self._masks[outer].release_multiple(inner, head_bits)
        for n in range(middle):
            self._masks[outer + n + 1].release_multiple(0, CAPACITY)
        if tail_bits:
            self._masks[outer + middle + 1].release_multiple(0, tail_bits)

    def _allocate_backward_from(
        self, outer: int, number_pages: int, align_pages: int
    ) -> tuple[PageIndex | None, int]:
        """Try to allocate ending within mask ``outer``.

        Returns the index on success; on failure, every tentative claim is undone
        and the next mask to try is returned alongside None (-1 to give up).
        """
        maximum_capacity = outer * CAPACITY + CAPACITY - 1
        if number_pages > maximum_capacity:
            return None, -1

        claimed = self._masks[outer].claim_multiple(min(number_pages, CAPACITY), align_pages)
        if claimed is None:
            return None, outer - 1
        inner, tail = claimed

        if tail == number_pages:
            return _to_page_index(outer * CAPACITY + inner), -1

        if outer == 0:
            self._rewind(outer, outer, tail)
            return None, -1

        remaining_capacity = maximum_capacity - CAPACITY
        remaining_pages = number_pages - tail
        if remaining_pages > remaining_capacity:
            self._rewind(outer, outer, tail)
            return None, -1

        head, middle = remaining_pages % CAPACITY, remaining_pages // CAPACITY
        middle_outer = outer - middle

        for i in range(outer - 1, middle_outer - 1, -1):
            if not self._masks[i].claim_at(0, CAPACITY):
                # The mask at `i` was left untouched by the failed claim.
                self._rewind(i + 1, outer, tail)
                return None, i - 1

        if head == 0:
            return _to_page_index(middle_outer * CAPACITY), -1

        head_outer = middle_outer - 1
        if not self._masks[head_outer].claim_at(CAPACITY - head, head):
            self._rewind(middle_outer, outer, tail)
            return None, head_outer

        return _to_page_index(head_outer * CAPACITY + CAPACITY - head), -1

    def _rewind(self, start: int, stop: int, tail: int) -> None:
        """Release whole masks ``start..stop`` and the ``tail`` low bits of mask ``stop``."""
        for i in range(start, stop):
            self._masks[i].release_multiple(0, CAPACITY)
        self._masks[stop].release_multiple(0, tail)