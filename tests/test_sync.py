import threading

import pytest

from commlib.sync import AutoStructure, CriticalSection


def test_auto_structure_starts_empty():
    assert AutoStructure().get() is None


def test_auto_structure_set_then_get_same_object():
    holder = AutoStructure()
    value = {"k": 1}
    holder.set(value)
    assert holder.get() is value


def test_auto_structure_initial_value():
    assert AutoStructure([1, 2]).get() == [1, 2]


def test_auto_structure_concurrent_sets():
    holder = AutoStructure()
    values = list(range(20))
    threads = [threading.Thread(target=holder.set, args=(v,)) for v in values]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert holder.get() in values


def test_with_block_sets_and_clears_owner():
    cs = CriticalSection()
    with cs:
        assert cs.owner == threading.get_ident()
    assert cs.owner is None


def test_nested_with_keeps_owner_until_outer_exit():
    cs = CriticalSection()
    with cs:
        with cs:
            assert cs.owner == threading.get_ident()
        assert cs.owner == threading.get_ident()
    assert cs.owner is None


def _acquired_from_other_thread(cs):
    done = threading.Event()

    def worker():
        with cs:
            done.set()

    thread = threading.Thread(target=worker, daemon=True)
    thread.start()
    thread.join(timeout=2)
    return done.is_set()


def test_try_unlock_releases_for_other_threads():
    cs = CriticalSection()
    with cs:
        assert cs.try_unlock() is True
        assert cs.owner is None
        assert _acquired_from_other_thread(cs)
    assert cs.owner is None


def test_try_unlock_by_non_owner_does_nothing():
    cs = CriticalSection()
    assert cs.try_unlock() is False


def test_section_excludes_other_threads_while_held():
    cs = CriticalSection()
    with cs:
        assert cs.owner == threading.get_ident()
        assert _acquired_from_other_thread(cs) is False
    assert cs.owner is None


def test_unlock_without_lock_raises():
    with pytest.raises(RuntimeError):
        CriticalSection().unlock()


def test_counter_is_consistent_under_contention():
    cs = CriticalSection()
    counter = {"n": 0}

    def bump():
        for _ in range(1000):
            with cs:
                counter["n"] += 1

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert counter["n"] == 4000
    assert cs.owner is None
    assert cs.try_unlock() is False