import pytest

from llpages.pages import PageIndex, PageSizes


def test_page_index_zero_is_rejected():
    with pytest.raises(ValueError):
        PageIndex(0)


def test_page_index_negative_is_rejected():
    with pytest.raises(ValueError):
        PageIndex(-3)


@pytest.mark.parametrize("value", [1, 3, 42, 99, 1023])
def test_page_index_new(value):
    assert PageIndex(value).value == value
    assert int(PageIndex(value)) == value


def test_page_index_ordering_and_equality():
    assert PageIndex(3) < PageIndex(42)
    assert PageIndex(7) == PageIndex(7)


def _set_get(index, number):
    sizes = PageSizes()
    sizes.set(PageIndex(index), number)
    return sizes.get(PageIndex(index))


def _unset(index, number):
    sizes = PageSizes()
    sizes.set(PageIndex(index), number)
    sizes.unset(PageIndex(index), number)
    return sizes.get(PageIndex(index))


def test_page_sizes_get_set_single_page_everywhere():
    assert [_set_get(index, 1) for index in range(1, 512)] == [1] * 511


def test_page_sizes_get_set_every_number():
    assert [_set_get(1, number) for number in range(1, 512)] == list(range(1, 512))


def test_page_sizes_unset_single_page_everywhere():
    assert [_unset(index, 1) for index in range(1, 512)] == [1] * 511


def test_page_sizes_unset_every_number():
    assert [_unset(1, number) for number in range(1, 512)] == [1] * 511


def test_page_sizes_fresh_slot_reads_one():
    assert PageSizes().get(PageIndex(100)) == 1


def test_page_sizes_accepts_plain_int():
    sizes = PageSizes()
    sizes.set(5, 300)
    assert sizes.get(5) == 300


def test_page_sizes_overflow_does_not_touch_other_entries():
    sizes = PageSizes()
    sizes.set(PageIndex(10), 400)
    sizes.set(PageIndex(20), 3)
    assert sizes.get(PageIndex(10)) == 400
    assert sizes.get(PageIndex(20)) == 3
    sizes.unset(PageIndex(10), 400)
    assert sizes.get(PageIndex(11)) == 1
    assert sizes.get(PageIndex(20)) == 3


@pytest.mark.parametrize("number", [0, 512])
def test_page_sizes_rejects_bad_number(number):
    with pytest.raises(ValueError):
        PageSizes().set(PageIndex(1), number)


def test_page_sizes_rejects_out_of_bounds_index():
    with pytest.raises(IndexError):
        PageSizes().set(PageIndex(512), 1)


def test_page_sizes_rejects_overflow_past_end():
    with pytest.raises(IndexError):
        PageSizes().set(PageIndex(511), 300)