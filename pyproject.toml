[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "scratchpad"
version = "0.1.0"
description = "A collection of small systems-programming experiments: hashing, consistent hashing, ring buffers, B-trees, a register VM, NaCl-style crypto and more."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "murmurhash",
    "consistent-hashing",
    "ring-buffer",
    "btree",
    "ziggurat",
    "assertions",
    "salsa20",
    "poly1305",
    "curve25519",
    "ed25519",
    "virtual-machine",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: Security :: Cryptography",
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
scratch-djb = "scratchpad.djb:main"
scratch-chash = "scratchpad.chash:main"
scratch-flags = "scratchpad.flags:main"
scratch-btree = "scratchpad.btree:main"
scratch-find-r = "scratchpad.zig:find_r_main"
scratch-zig-solver = "scratchpad.zig:solver_main"
scratch-insist = "scratchpad.insist:main"
scratch-detach = "scratchpad.detach:main"
scratch-nacl-encrypt = "scratchpad.naclpad:encrypt_main"
scratch-nacl-decrypt = "scratchpad.naclpad:decrypt_main"
scratch-nacl-decrypt2 = "scratchpad.naclpad:decrypt2_main"
scratch-nacl-decrypt3 = "scratchpad.naclpad:decrypt3_main"
scratch-regm = "scratchpad.regm:main"

[tool.hatch.build.targets.wheel]
packages = ["scratchpad"]

[tool.pytest.ini_options]
addopts = "-ra"
