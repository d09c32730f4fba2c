import pytest

from scratchpad.murmur import murmur64a, murmur64b


@pytest.mark.parametrize("fn", [murmur64a, murmur64b])
def test_empty_input_with_zero_seed_hashes_to_zero(fn):
    assert fn(b"", 0) == 0


@pytest.mark.parametrize("fn", [murmur64a, murmur64b])
def test_distinct_node_names_hash_apart(fn):
    names = [f"node0{i}.ring.example.com".encode() for i in range(1, 5)]
    assert len({fn(name, 0) for name in names}) == 4


@pytest.mark.parametrize("fn", [murmur64a, murmur64b])
def test_str_and_bytes_agree(fn):
    assert fn("key-123", 0) == fn(b"key-123", 0)


@pytest.mark.parametrize("fn", [murmur64a, murmur64b])
def test_seed_changes_result(fn):
    assert fn(b"some key", 0) != fn(b"some key", 1)


@pytest.mark.parametrize("fn", [murmur64a, murmur64b])
def test_result_fits_in_64_bits(fn):
    for n in range(0, 40):
        value = fn(bytes(range(n)), 7)
        assert 0 <= value < 2**64


@pytest.mark.parametrize("fn", [murmur64a, murmur64b])
def test_every_tail_length_gives_distinct_hashes(fn):
    results = {fn(b"abcdefghijklmnopq"[:n], 0) for n in range(1, 18)}
    assert len(results) == 17


@pytest.mark.parametrize("fn", [murmur64a, murmur64b])
def test_single_byte_change_changes_hash(fn):
    assert fn(b"abcdefgh12345", 0) != fn(b"abcdefgh12346", 0)


def test_variants_differ():
    assert murmur64a(b"hello world", 0) != murmur64b(b"hello world", 0)