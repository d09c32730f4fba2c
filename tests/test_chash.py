import io
import re

import pytest

from scratchpad.chash import Node, Ring, main
from scratchpad.murmur import murmur64a


def make_nodes():
    return [
        Node("a.example.com", 1),
        Node("b.example.com", 2),
        Node("c.example.com", 1),
    ]


def test_vnode_count_follows_spread_and_weight():
    ring = Ring(make_nodes(), 4)
    assert len(ring.vnodes) == 4 * (1 + 2 + 1)


def test_vnodes_are_sorted():
    ring = Ring(make_nodes(), 8)
    keys = [v.key for v in ring.vnodes]
    assert keys == sorted(keys)


def test_vnode_keys_derive_from_index_and_name():
    nodes = [Node("solo.example.com", 1)]
    ring = Ring(nodes, 3)
    expected = sorted(murmur64a(f"{j}-solo.example.com", 0) for j in range(3))
    assert [v.key for v in ring.vnodes] == expected


def test_lookup_returns_a_ring_member():
    nodes = make_nodes()
    ring = Ring(nodes, 16)
    for i in range(100):
        assert ring.lookup(f"key-{i}") in nodes


def test_lookup_does_not_depend_on_node_order():
    forward = Ring(make_nodes(), 16)
    backward = Ring(list(reversed(make_nodes())), 16)
    keys = [f"stable-{i}" for i in range(50)]
    assert [forward.lookup(k).name for k in keys] == [
        backward.lookup(k).name for k in keys
    ]


def test_lookup_lands_on_next_vnode_clockwise():
    ring = Ring(make_nodes(), 16)
    for i in range(50):
        key = f"k{i}"
        h = murmur64a(key, 0)
        node = ring.lookup(key)
        owners = [v for v in ring.vnodes if v.key >= h]
        expected = owners[0].node if owners else ring.vnodes[0].node
        assert node is expected


def test_single_node_owns_everything():
    only = Node("only.example.com", 1)
    ring = Ring([only], 2)
    assert all(ring.lookup(f"x{i}") is only for i in range(20))


def test_init_resets_counters():
    nodes = make_nodes()
    nodes[0].u = 9
    Ring(nodes, 1)
    assert nodes[0].u == 0


def test_empty_node_list_rejected():
    with pytest.raises(ValueError):
        Ring([], 16)


def test_zero_weight_ring_rejected():
    with pytest.raises(ValueError):
        Ring([Node("zero.example.com", 0)], 16)


def test_main_quiet_summary(monkeypatch, capsys):
    keys = "\n".join(f"item-{i}" for i in range(40)) + "\n"
    monkeypatch.setattr("sys.stdin", io.StringIO(keys))
    assert main(["-q"]) == 0
    out = capsys.readouterr().out
    lines = [line for line in out.splitlines() if line]
    assert len(lines) == 4
    counts = [int(re.search(r"for\s+(\d+)/(\d+) keys", line).group(1)) for line in lines]
    assert sum(counts) == 40
    assert all("/40 keys" in line for line in lines)


def test_main_verbose_lists_vnodes(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("hello\n"))
    assert main(["-s", "2"]) == 0
    out = capsys.readouterr().out
    vnode_lines = [l for l in out.splitlines() if re.match(r"^0x[0-9a-f]{16}  \d  ", l)]
    assert len(vnode_lines) == 2 * 5
    assert "key hello" in out


def test_main_bad_option(capsys):
    assert main(["-x"]) == 1
    assert "USAGE" in capsys.readouterr().err