"""A consistent-hashing ring of weighted nodes."""

from __future__ import annotations

import bisect
import getopt
import re
import sys
from dataclasses import dataclass, field

from scratchpad.murmur import murmur64a


@dataclass(eq=False)
class Node:
    """A physical node in the ring; ``u`` counts keys placed on it."""

    name: str
    weight: int
    u: int = field(default=0)


@dataclass(frozen=True)
class VNode:
    """A virtual node: one point on the ring owned by a physical node."""

    node: Node
    key: int


class Ring:
    """Consistent-hashing ring with ``spread`` virtual nodes per unit of weight."""

    def __init__(self, nodes: list[Node], spread: int = 16) -> None:
        self.nodes = list(nodes)
        if not self.nodes:
            raise ValueError("a ring needs at least one node")
        if spread < 1:
            raise ValueError("spread must be positive")
        self.spread = spread

        vnodes = []
        for node in self.nodes:
            node.u = 0
            vnodes.extend(
                VNode(node, murmur64a(f"{j}-{node.name}", 0))
                for j in range(spread * node.weight)
            )
        if not vnodes:
            raise ValueError("the ring has no virtual nodes")
        vnodes.sort(key=lambda v: v.key)
        self.vnodes = vnodes
        self._keys = [v.key for v in vnodes]

    def __len__(self) -> int:
        return len(self.vnodes)

    def lookup(self, key: str | bytes) -> Node:
        """Return the node responsible for ``key``."""
        h = murmur64a(key, 0)
        i = bisect.bisect_left(self._keys, h)
        if i == len(self._keys):
            return self.vnodes[0].node
        return self.vnodes[i].node


def _hex18(value: int) -> str:
    return f"{value:018x}" if value == 0 else f"0x{value:016x}"


def _atoi(text: str) -> int:
    m = re.match(r"\s*([+-]?\d+)", text)
    return int(m.group(1)) if m else 0


def _default_nodes() -> list[Node]:
    return [
        Node("node01.ring.example.com", 1),
        Node("node02.ring.example.com", 2),
        Node("node03.ring.example.com", 1),
        Node("node04.ring.example.com", 1),
    ]


def main(argv: list[str] | None = None) -> int:
    """Place each line of standard input on a demo ring and report the spread."""
    args = sys.argv[1:] if argv is None else list(argv)
    usage = "USAGE: ring [-q] [-s spread]"
    quiet = False
    spread = 0
    try:
        opts, _ = getopt.getopt(args, "qs:")
    except getopt.GetoptError:
        print(usage, file=sys.stderr)
        return 1
    for opt, value in opts:
        if opt == "-q":
            quiet = True
        else:
            spread = _atoi(value)
    if spread < 0:
        print(usage, file=sys.stderr)
        return 1

    nodes = _default_nodes()
    ring = Ring(nodes, spread or 16)

    if not quiet:
        for v in ring.vnodes:
            print(f"{_hex18(v.key)}  {v.node.weight}  {v.node.name}")

    count = 0
    for line in sys.stdin:
        key = line[:-1] if line.endswith("\n") else line
        node = ring.lookup(key)
        count += 1
        node.u += 1
        if not quiet:
            print(
                f"key {key:<30} ({_hex18(murmur64a(key, 0))}) "
                f"is at {node.name} ({node.weight})"
            )

    if not quiet:
        print("\n")
    for node in nodes:
        share = node.u * 100.0 / count if count else float("nan")
        print(
            f"node {node.name} ({node.weight}) accounts for "
            f"{node.u: 5d}/{count} keys ({share:5.2f}%)"
        )
    return 0