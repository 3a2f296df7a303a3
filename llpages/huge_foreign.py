"""Page allocation within a huge page, shared between the owning thread and others."""

from __future__ import annotations

from llpages.page_tokens import PageTokens
from llpages.pages import PageIndex, PageSizes


class HugePageForeign:
    """Allocates runs of large pages and remembers each run's length.

    Single pages take a fast path that leaves the size record untouched, since a
    fresh size slot already reads as one page.
    """

    def __init__(self, number_pages: int) -> None:
        self._pages = PageTokens(number_pages)
        self._sizes = PageSizes()
        self._number_pages = number_pages

    def __repr__(self) -> str:
        return f"HugePageForeign(number_pages={self._number_pages})"

    @property
    def number_pages(self) -> int:
        """The number of pages available for allocation."""
        return self._number_pages

    def allocate(self, number_pages: int, align_pages: int = 1) -> PageIndex | None:
        """Allocate ``number_pages`` consecutive pages; return the first index or None.

        The index returned is a multiple of ``align_pages``.
        """
        if number_pages == 1:
            return self._pages.fast_allocate()

        index = self._pages.flexible_allocate(number_pages, align_pages)
        if index is not None:
            self._sizes.set(index, number_pages)
        return index

    def deallocate(self, index: PageIndex | int) -> None:
        """Free all the pages of the allocation starting at ``index``."""
        if not isinstance(index, PageIndex):
            index = PageIndex(index)
        if index.value > self._number_pages:
            raise IndexError(
                f"page index {index.value} exceeds the {self._number_pages} available pages"
            )

        number_pages = self._sizes.get(index)
        if number_pages == 1:
            self._pages.fast_deallocate(index)
        else:
            self._pages.flexible_deallocate(index, number_pages)
            self._sizes.unset(index, number_pages)