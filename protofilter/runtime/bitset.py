"""Growable bit vector over permission indices."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

WORD_BITS = 64
_WORD_MASK = (1 << WORD_BITS) - 1


class BitSet:
    """Set of permission indices stored as 64-bit words.

    A mask is built once per authorization context and then only read by
    generated filters. Mutation from several threads needs external locking;
    concurrent reads after construction are safe.

    Example:
        >>> mask = BitSet()
        >>> mask.set(130)
        >>> mask.has(130), mask.has(129)
        (True, False)
    """

    __slots__ = ("_words",)

    def __init__(self) -> None:
        self._words: list[int] = [0]

    @classmethod
    def from_indices(cls, indices: Iterable[int]) -> BitSet:
        """Build a mask with every index in ``indices`` set."""
        bitset = cls()
        for index in indices:
            bitset.set(index)
        return bitset

    def set(self, index: int) -> None:
        """Mark ``index`` present, growing storage as needed."""
        if index < 0:
            raise ValueError(f"Permission index must be non-negative, got {index}")

        word, bit = divmod(index, WORD_BITS)
        missing = word + 1 - len(self._words)
        if missing > 0:
            self._words.extend([0] * missing)

        self._words[word] |= 1 << bit

    def has(self, index: int) -> bool:
        """Return True when ``index`` was previously set."""
        if index < 0:
            return False

        word, bit = divmod(index, WORD_BITS)
        if word >= len(self._words):
            return False

        return (self._words[word] >> bit) & 1 == 1

    def indices(self) -> Iterator[int]:
        """Yield set indices in ascending order."""
        for word_index, word in enumerate(self._words):
            base = word_index * WORD_BITS
            while word:
                low = word & -word
                yield base + low.bit_length() - 1
                word ^= low

    @property
    def words(self) -> tuple[int, ...]:
        """Copy of the underlying 64-bit words, lowest index first."""
        return tuple(word & _WORD_MASK for word in self._words)

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.has(index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BitSet):
            return NotImplemented
        return list(self.indices()) == list(other.indices())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"BitSet({list(self.indices())!r})"
