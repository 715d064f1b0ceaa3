"""
The raw word-store boundary and an in-memory implementation.

Overview
- WordStore: the narrow capability the reader depends on. Two primitives, one per
  region, each returning one unsigned 256-bit word or raising StoreError.
- InMemoryWordStore: a flat arena keyed by derived address. Unwritten addresses read
  as zero; addresses outside ``[0, max_address]`` raise AddressRangeError; a store
  marked unreachable raises StoreUnavailableError on every read.

Notes
- The persistent and transient regions are independent address spaces.
- clear_transient() ends a top-level operation: every transient word reads zero again.
- Write helpers exist for tests and simulations; the reader never writes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from slotview.core.constants import MAX_SLOT, WORD_MASK
from slotview.core.slots import field_address

from .errors import AddressRangeError, StoreUnavailableError

__all__ = [
    "WordStore",
    "InMemoryWordStore",
]


@runtime_checkable
class WordStore(Protocol):
    """
    Read-only access to a store of 256-bit words.

    Implementations may block (e.g. a remote node); the reader calls them directly and
    propagates any StoreError they raise.
    """

    def read_persistent(self, address: int) -> int:
        """Return the persistent word at ``address``; raise StoreError on failure."""
        ...

    def read_transient(self, address: int) -> int:
        """Return the transient word at ``address``; raise StoreError on failure."""
        ...


class InMemoryWordStore:
    """
    Dict-backed WordStore with write helpers.

    Attributes:
        max_address (int): Highest address served; reads above it raise AddressRangeError.
        unreachable (bool): When True every read and write raises StoreUnavailableError.

    Examples:
        >>> store = InMemoryWordStore()
        >>> store.read_persistent(42)
        0
        >>> store.write_persistent(42, 7)
        >>> store.read_persistent(42)
        7
    """

    def __init__(self, max_address: int = MAX_SLOT, *, unreachable: bool = False) -> None:
        if max_address < 0 or max_address > MAX_SLOT:
            raise ValueError(f"max_address must be within [0, 2**256 - 1], got {max_address}")
        self.max_address = max_address
        self.unreachable = unreachable
        self._persistent: dict[int, int] = {}
        self._transient: dict[int, int] = {}

    def _check(self, address: int) -> None:
        if self.unreachable:
            raise StoreUnavailableError("in-memory store marked unreachable")
        if address < 0 or address > self.max_address:
            raise AddressRangeError(address)

    @staticmethod
    def _check_word(word: int) -> None:
        if word < 0 or word > WORD_MASK:
            raise ValueError(f"word out of range: {word}")

    # ------------------------------ reads ------------------------------------

    def read_persistent(self, address: int) -> int:
        self._check(address)
        return self._persistent.get(address, 0)

    def read_transient(self, address: int) -> int:
        self._check(address)
        return self._transient.get(address, 0)

    # ------------------------------ writes -----------------------------------

    def write_persistent(self, address: int, word: int) -> None:
        self._check(address)
        self._check_word(word)
        self._persistent[address] = word

    def write_transient(self, address: int, word: int) -> None:
        self._check(address)
        self._check_word(word)
        self._transient[address] = word

    def write_record(self, base: int, words: Sequence[int], *, transient: bool = False) -> None:
        """Write consecutive words starting at ``base``."""
        write = self.write_transient if transient else self.write_persistent
        for offset, word in enumerate(words):
            write(field_address(base, offset), word)

    def clear_transient(self) -> None:
        """Discard every transient word, as at the end of a top-level operation."""
        self._transient.clear()

    def __len__(self) -> int:
        """Number of persistent words written."""
        return len(self._persistent)
