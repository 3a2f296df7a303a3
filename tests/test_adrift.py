import threading

import pytest

from llpages.adrift import Adrift


def test_adrift_sequence():
    adrift = Adrift()
    assert adrift.is_adrift() is None

    assert adrift.cast_adrift() == 1
    assert adrift.is_adrift() == 1

    assert adrift.catch(3) is False
    assert adrift.is_adrift() == 1

    assert adrift.catch(1) is True
    assert adrift.is_adrift() is None

    assert adrift.cast_adrift() == 3
    assert adrift.is_adrift() == 3


def test_adrift_value_counts_generations():
    adrift = Adrift()
    assert adrift.value() == 0
    adrift.cast_adrift()
    adrift.catch(1)
    assert adrift.value() == 2


def test_adrift_catch_even_generation_rejected():
    with pytest.raises(ValueError):
        Adrift().catch(2)


def test_adrift_cast_twice_rejected():
    adrift = Adrift()
    adrift.cast_adrift()
    with pytest.raises(RuntimeError):
        adrift.cast_adrift()


def test_adrift_second_catch_fails():
    adrift = Adrift()
    generation = adrift.cast_adrift()
    assert adrift.catch(generation) is True
    assert adrift.catch(generation) is False


def test_adrift_concurrent_catch():
    workers = 4
    adrift = Adrift()

    for _ in range(100):
        current = adrift.is_adrift()
        if current is not None:
            assert adrift.catch(current)
        cast = adrift.cast_adrift()

        caught = [False] * workers
        barrier = threading.Barrier(workers)

        def attempt(worker):
            barrier.wait()
            caught[worker] = adrift.catch(cast)

        threads = [threading.Thread(target=attempt, args=(w,)) for w in range(workers)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sum(caught) == 1
        assert adrift.is_adrift() is None
        assert adrift.value() == cast + 1