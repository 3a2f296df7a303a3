import pytest

from llpages.huge_foreign import HugePageForeign
from llpages.pages import PageIndex


def _allocate(foreign, number_pages, align_pages=1):
    index = foreign.allocate(number_pages, align_pages)
    return None if index is None else index.value


def test_allocate_deallocate_fast():
    foreign = HugePageForeign(511)

    for i in range(95):
        assert _allocate(foreign, 1) == i + 1

    reused = PageIndex(75)
    foreign.deallocate(reused)

    assert _allocate(foreign, 1) == reused.value


def test_allocate_deallocate_flexible():
    foreign = HugePageForeign(511)

    assert _allocate(foreign, 26) == 64 * 7 + 38
    assert _allocate(foreign, 25) == 64 * 7 + 13
    assert _allocate(foreign, 26) == 64 * 6 + 51
    assert _allocate(foreign, 25) == 64 * 6 + 26

    foreign.deallocate(PageIndex(64 * 6 + 51))
    foreign.deallocate(PageIndex(64 * 7 + 13))

    assert _allocate(foreign, 27) == 64 * 7 + 11
    assert _allocate(foreign, 24) == 64 * 6 + 51


def test_fast_allocate_exhaustion():
    foreign = HugePageForeign(3)

    assert [_allocate(foreign, 1) for _ in range(3)] == [1, 2, 3]
    assert foreign.allocate(1) is None

    foreign.deallocate(2)
    assert _allocate(foreign, 1) == 2


def test_large_allocation_round_trip():
    foreign = HugePageForeign(511)

    first = _allocate(foreign, 300)
    assert first is not None
    assert first + 300 == 512

    foreign.deallocate(first)

    assert _allocate(foreign, 300) == first


def test_aligned_allocation():
    foreign = HugePageForeign(511)

    index = _allocate(foreign, 4, 4)
    assert index is not None
    assert index % 4 == 0


def test_allocation_too_large_fails():
    foreign = HugePageForeign(511)

    assert _allocate(foreign, 511) == 1
    assert foreign.allocate(2) is None
    assert foreign.allocate(1) is None


def test_deallocate_zero_index_rejected():
    foreign = HugePageForeign(511)

    with pytest.raises(ValueError):
        foreign.deallocate(0)


def test_deallocate_out_of_range_rejected():
    foreign = HugePageForeign(10)

    with pytest.raises(IndexError):
        foreign.deallocate(11)


def test_number_pages():
    assert HugePageForeign(42).number_pages == 42