import pytest

from scratchpad.ringbuf import StringRing


def test_new_ring_state():
    r = StringRing(5)
    assert r.size == 5
    assert r.head == 0
    assert r.tail == 0
    assert r.is_empty()
    assert not r.is_full()


@pytest.mark.parametrize("i, expected", [(0, 1), (1, 2), (2, 3), (3, 4), (4, 0)])
def test_next_wraps(i, expected):
    assert StringRing(5).next_index(i) == expected


@pytest.mark.parametrize("i, expected", [(0, 4), (1, 0), (2, 1), (3, 2), (4, 3)])
def test_prev_wraps(i, expected):
    assert StringRing(5).prev_index(i) == expected


def test_filling_a_ring():
    r = StringRing(5)
    r.add("first string")
    assert not r.is_empty()
    assert not r.is_full()

    r.add("second string")
    r.add("third string")
    assert not r.is_empty()
    assert not r.is_full()

    r.add("fourth string")
    assert not r.is_empty()
    assert r.is_full()


def test_iteration_and_wraparound():
    r = StringRing(3)
    assert len(list(r)) == 0

    r.add("A")
    assert len(list(r)) == 1
    assert r.first() == "A"
    assert r.last() == "A"

    r.add("B")
    assert len(list(r)) == 2
    assert r.first() == "A"
    assert r.last() == "B"

    r.add("C")
    assert len(list(r)) == 2
    assert r.first() == "B"
    assert r.last() == "C"
    assert list(r) == ["B", "C"]


def test_empty_ring_has_no_first_or_last():
    r = StringRing(4)
    assert r.first() is None
    assert r.last() is None


def test_len_never_exceeds_capacity():
    r = StringRing(4)
    for i in range(10):
        r.add(str(i))
        assert len(r) <= 3
    assert list(r) == ["7", "8", "9"]


def test_invalid_size():
    with pytest.raises(ValueError):
        StringRing(0)


def test_non_string_rejected():
    with pytest.raises(TypeError):
        StringRing(3).add(42)