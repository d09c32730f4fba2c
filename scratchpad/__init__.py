"""Small systems-programming experiments: hashing, data structures, crypto and a bytecode VM."""

__version__ = "0.1.0"