"""A fixed-size ring of strings that overwrites its oldest entry when full."""

from __future__ import annotations

from collections.abc import Iterator


class StringRing:
    """Ring buffer of strings holding at most ``size - 1`` entries."""

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("ring size must be positive")
        self.size = size
        self.head = 0
        self.tail = 0
        self._strings: list[str | None] = [None] * size

    def next_index(self, i: int) -> int:
        return (i + 1) % self.size

    def prev_index(self, i: int) -> int:
        return (i - 1 + self.size) % self.size

    def is_empty(self) -> bool:
        return self.head == self.tail

    def is_full(self) -> bool:
        return self.next_index(self.tail) == self.head

    def add(self, s: str) -> None:
        """Append ``s``, dropping the oldest entry if the ring is full."""
        if not isinstance(s, str):
            raise TypeError("only strings can be added to the ring")
        if self.is_full():
            self.head = self.next_index(self.head)
        self._strings[self.tail] = s
        self.tail = self.next_index(self.tail)

    def first(self) -> str | None:
        """Return the oldest entry, or None when empty."""
        return None if self.is_empty() else self._strings[self.head]

    def last(self) -> str | None:
        """Return the newest entry, or None when empty."""
        return None if self.is_empty() else self._strings[self.prev_index(self.tail)]

    def __len__(self) -> int:
        return (self.tail - self.head) % self.size

    def __iter__(self) -> Iterator[str]:
        i = self.head
        while i != self.tail:
            yield self._strings[i]
            i = self.next_index(i)