"""
Lightweight typing aliases used across the codec, derivation helpers, and reader.

Provides minimal NewTypes and aliases to improve readability and static checks.
This module contains no runtime logic and is zero-IO.

Examples:
    >>> from slotview.core.typing import Slot
    >>> def next_slot(s: Slot) -> Slot:
    ...     return Slot(int(s) + 1)
    >>> next_slot(Slot(6))
    7
"""

from __future__ import annotations

from typing import NewType, Union

__all__ = [
    "Slot",
    "Word",
    "PoolId",
    "PositionKey",
    "BytesLike",
    "CollectionKey",
]

# 256-bit word address and 256-bit word value, both plain ints.
Slot = NewType("Slot", int)
Word = NewType("Word", int)

# 32-byte identifiers.
PoolId = NewType("PoolId", bytes)
PositionKey = NewType("PositionKey", bytes)

BytesLike = Union[bytes, bytearray, memoryview]

# Mapping keys accepted by collection_entry_address: signed ints or up to 32 bytes.
CollectionKey = Union[int, bytes, bytearray, memoryview]
