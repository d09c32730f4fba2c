# scratchpad

A bench of small, self-contained experiments in systems programming, each
one a module you can import or a command you can run. Nothing here is meant
to be production infrastructure; everything is meant to be read, poked at
and measured.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

| Module | What it does |
| --- | --- |
| `scratchpad.murmur` | 64-bit MurmurHash2 variants `murmur64a` and `murmur64b` |
| `scratchpad.djb` | The djb2 string hash, `djb_hash` |
| `scratchpad.chash` | A weighted consistent-hashing `Ring` of `Node`s and `VNode`s |
| `scratchpad.ringbuf` | `StringRing`, a fixed-size ring of strings that overwrites the oldest entry |
| `scratchpad.flags` | Bit-flag decoding with the `Flag` enum and `describe` |
| `scratchpad.btree` | An in-memory `BTree` with a tunable split point and an `Analysis` of its shape |
| `scratchpad.zig` | Numerical search for the ziggurat algorithm's tail parameter `r` |
| `scratchpad.insist` | `insist`, an assertion helper that reports and exits with a chosen code |
| `scratchpad.detach` | `detach`, running a command in the background with its standard streams discarded |
| `scratchpad.salsa` | Salsa20/XSalsa20 streams, Poly1305 and `secretbox` |
| `scratchpad.pubkey` | SHA-512, Curve25519, public-key `box` and Ed25519 `sign` |
| `scratchpad.naclpad` | Demonstrations of `box` zero-padding, right and wrong |
| `scratchpad.opcodes` | Opcode, assembler-token and syntax tables of the register VM |
| `scratchpad.regm` | A small register-based bytecode `VM` |

## Using the library

```python
from scratchpad.murmur import murmur64a
from scratchpad.ringbuf import StringRing

print(hex(murmur64a(b"some key", 0)))

ring = StringRing(3)
ring.add("A")
ring.add("B")
print(ring.first(), ring.last())   # A B
print(list(ring))                  # ['A', 'B']
```

A `StringRing` of size *n* holds at most *n − 1* strings; adding to a full
ring drops the oldest one.

```python
from scratchpad.btree import BTree

tree = BTree(340, 75)
for ts in range(1_234_567_890, 1_234_567_890 + 86_400, 1_800):
    tree.insert(ts, ts)
print(tree.get(1_234_567_890))
print(tree.analyze())
```

```python
from scratchpad.salsa import secretbox, secretbox_open

key = bytes(32)
nonce = bytes(24)
cipher = secretbox(bytes(32) + b"hello", nonce, key)
print(secretbox_open(cipher, nonce, key)[32:])   # b'hello'
```

As in NaCl, `secretbox` and `box` take messages that start with 32 zero
bytes and give ciphertexts that start with 16 zero bytes; `secretbox_open`
raises `AuthenticationError` when the tag does not match.

## Commands

Hashing:

```
scratch-djb alpha beta gamma
```

prints each argument's djb2 hash (low byte), then that value mod 3 and mod 4.

Consistent hashing — reads one key per line from standard input and reports
which of four weighted nodes owns it, then the share each node received:

```
printf 'user:1\nuser:2\nuser:3\n' | scratch-chash -s 16
printf 'user:1\nuser:2\n' | scratch-chash -q
```

`-s` sets the number of virtual nodes per unit of weight (default 16); `-q`
prints only the final distribution.

Bit flags, printing forty pseudo-random values and the flags set in each:

```
scratch-flags
```

B-tree, inserting two years of half-hourly timestamps and printing the
tree's shape and memory estimate:

```
scratch-btree
```

Ziggurat parameters:

```
scratch-find-r          # r and v for 256 boxes
scratch-find-r 128      # r and v for 128 boxes
scratch-zig-solver 3.6 1e-15
```

Assertions — a demonstration that fails on purpose and exits with code 23:

```
scratch-insist
```

Running something detached from the terminal:

```
scratch-detach sleep 30
```

NaCl padding demonstrations. `scratch-nacl-decrypt` and
`scratch-nacl-decrypt2` are expected to fail, because they get the
zero-padding wrong; `scratch-nacl-decrypt3` gets it right and prints the
recovered poem:

```
scratch-nacl-encrypt
scratch-nacl-decrypt
scratch-nacl-decrypt2
scratch-nacl-decrypt3
```

Register VM, running a compiled bytecode file; further arguments are pushed
onto the VM's data stack as heap strings, followed by their count:

```
scratch-regm program.b first second
```