"""An in-memory B-tree of 32-bit keys, sized to explore node fill and overhead."""

from __future__ import annotations

import argparse
import bisect
import sys
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

DEFAULT_ORDER = 340
DEFAULT_SPLIT = 75
_KEY_LIMIT = 2**32


@dataclass
class _Node:
    keys: list[int] = field(default_factory=list)
    values: list[Any] = field(default_factory=list)
    children: list[_Node] = field(default_factory=list)

    @property
    def leaf(self) -> bool:
        return not self.children


@dataclass(frozen=True)
class Analysis:
    """Shape of a tree: node count, slots in use and depth below the root."""

    nodes: int
    used: int
    depth: int
    order: int
    split_factor: int

    @property
    def node_bytes(self) -> int:
        """Size of one fixed-layout node: two ints, the keys and the value slots."""
        return 8 + 4 * self.order + 8 * (self.order + 1)

    @property
    def total_bytes(self) -> int:
        return self.nodes * self.node_bytes

    @property
    def fill_percent(self) -> float:
        return self.used * 100.0 / (self.nodes * self.order)

    @property
    def bytes_per_key(self) -> float:
        return self.total_bytes / self.used


class BTree:
    """B-tree that splits a node as soon as it holds ``order`` keys.

    The split point is ``split_factor`` percent of the way through the node.
    """

    def __init__(self, order: int = DEFAULT_ORDER, split_factor: int = DEFAULT_SPLIT) -> None:
        mid = order * split_factor // 100
        if order < 2 or mid < 1 or mid > order - 1:
            raise ValueError(
                f"order {order} with split factor {split_factor}% gives no usable split point"
            )
        self.order = order
        self.split_factor = split_factor
        self._root = _Node()
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def __contains__(self, key: int) -> bool:
        try:
            self.get(key)
        except KeyError:
            return False
        return True

    def insert(self, key: int, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any value already there."""
        if not 0 <= key < _KEY_LIMIT:
            raise ValueError(f"key {key} is not an unsigned 32-bit value")
        split = self._insert(self._root, key, value)
        if split is not None:
            median_key, median_value, right = split
            left = _Node(self._root.keys, self._root.values, self._root.children)
            self._root = _Node([median_key], [median_value], [left, right])

    def _insert(self, node: _Node, key: int, value: Any) -> tuple[int, Any, _Node] | None:
        i = bisect.bisect_left(node.keys, key)
        if i < len(node.keys) and node.keys[i] == key:
            node.values[i] = value
            return None

        if node.leaf:
            node.keys.insert(i, key)
            node.values.insert(i, value)
            self._count += 1
        else:
            split = self._insert(node.children[i], key, value)
            if split is not None:
                median_key, median_value, right = split
                node.keys.insert(i, median_key)
                node.values.insert(i, median_value)
                node.children.insert(i + 1, right)

        if len(node.keys) == self.order:
            mid = len(node.keys) * self.split_factor // 100
            right = _Node(node.keys[mid + 1:], node.values[mid + 1:], node.children[mid + 1:])
            median = (node.keys[mid], node.values[mid])
            del node.keys[mid:]
            del node.values[mid:]
            del node.children[mid + 1:]
            return median[0], median[1], right
        return None

    def get(self, key: int) -> Any:
        """Return the value stored under ``key``; raise KeyError if absent."""
        node = self._root
        while True:
            i = bisect.bisect_left(node.keys, key)
            if i < len(node.keys) and node.keys[i] == key:
                return node.values[i]
            if node.leaf:
                raise KeyError(key)
            node = node.children[i]

    def items(self) -> Iterator[tuple[int, Any]]:
        """Yield ``(key, value)`` pairs in ascending key order."""
        yield from self._items(self._root)

    def _items(self, node: _Node) -> Iterator[tuple[int, Any]]:
        if node.leaf:
            yield from zip(node.keys, node.values)
            return
        for child, key, value in zip(node.children, node.keys, node.values):
            yield from self._items(child)
            yield key, value
        yield from self._items(node.children[-1])

    def analyze(self) -> Analysis:
        """Count nodes and used slots (keys plus one per node) and measure depth."""
        nodes = used = 0
        pending = [self._root]
        while pending:
            node = pending.pop()
            nodes += 1
            used += len(node.keys) + 1
            pending.extend(node.children)

        depth = 0
        node = self._root
        while not node.leaf:
            depth += 1
            node = node.children[0]
        return Analysis(nodes, used, depth, self.order, self.split_factor)

    def dump(self) -> str:
        """Return an indented picture of every node in the tree."""
        lines: list[str] = []
        self._dump(self._root, 0, lines)
        return "\n".join(lines) + "\n"

    def _dump(self, node: _Node, indent: int, lines: list[str]) -> None:
        pad = " " * indent
        inner = " " * (indent + 2)
        lines.append(f"{pad}[btree {id(node):#x} // {len(node.keys)} keys]")
        if node.leaf:
            for i, (key, value) in enumerate(zip(node.keys, node.values)):
                lines.append(f"{inner}[{i:03d}] {key: 10d} (= {value})")
            return
        for i, (key, value, child) in enumerate(zip(node.keys, node.values, node.children)):
            lines.append(f"{inner}[{i:03d}] {key: 10d} (= {value}) ({id(child):#x}) -->")
            self._dump(child, indent + 8, lines)
        last = node.children[-1]
        lines.append(f"{inner}[{len(node.keys):03d}]          ~ ({id(last):#x}) -->")
        self._dump(last, indent + 8, lines)


def _human_size(size: float) -> str:
    unit = ""
    if size > 1024 * 1024 * 1024:
        size /= 1024 * 1024 * 1024
        unit = "G"
    if size > 1024 * 1024:
        size /= 1024 * 1024
        unit = "M"
    if size > 1024:
        size /= 1024
        unit = "K"
    return f"{size:0.1f} {unit}B"


def main(argv: list[str] | None = None) -> int:
    """Fill a tree with evenly spaced timestamps and report on its shape."""
    parser = argparse.ArgumentParser(prog="btree")
    parser.add_argument("--years", type=int, default=2)
    parser.add_argument("--span", type=int, default=30, help="minutes between keys")
    parser.add_argument("--order", type=int, default=DEFAULT_ORDER)
    parser.add_argument("--split", type=int, default=DEFAULT_SPLIT)
    args = parser.parse_args(argv)
    if args.years < 0 or args.span < 1:
        parser.error("years must be non-negative and span positive")

    try:
        tree = BTree(args.order, args.split)
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1

    err = sys.stderr
    for i in range(0, args.years * 365 * 86400, args.span * 60):
        ts = (1234567890 + i) % _KEY_LIMIT
        if ts % 1000000 == 0:
            err.write(f"{ts}\n")
        tree.insert(ts, ts)

    a = tree.analyze()
    err.write(
        f"N={a.order}, SFF={a.split_factor / 100.0:0.2f}, "
        f"YEARS={args.years}, MIN={args.span}\n"
    )
    err.write(f"{a.used} keys / {a.nodes} nodes / {a.depth} levels\n")
    err.write(f"{a.node_bytes} bytes per node\n")
    err.write(f"{a.fill_percent:0.3f}% slots filled\n")
    err.write(f"{a.bytes_per_key:0.1f} bytes (overhead) per key\n")
    err.write(f"{_human_size(float(a.total_bytes))}\n")
    err.write("\n")
    return 0