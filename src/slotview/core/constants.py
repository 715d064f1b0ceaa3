"""
Word geometry and root slot constants for the singleton pool-manager store.

Defines the native word width, the storage slots of the store-level variables, the
offsets of each field inside a pool record, and the labels hashed into transient
slots. This module is zero-IO and uses only the Python standard library.

Notes:
    - Offsets count 256-bit words from the pool record base (see slotview.core.slots).
    - Root slots follow the declaration order of the store's state variables:
      owner, protocol fees accrued, protocol fee controller, claim operators,
      claim balances, claim allowances, pools.
    - Changes to these constants change every derived address and must follow a
      major LAYOUT_V bump (slotview.core.versioning).
"""

from __future__ import annotations

__all__ = [
    "WORD_BITS",
    "WORD_BYTES",
    "WORD_MASK",
    "MAX_SLOT",
    "ADDRESS_BYTES",
    "OWNER_SLOT",
    "PROTOCOL_FEES_ACCRUED_SLOT",
    "PROTOCOL_FEE_CONTROLLER_SLOT",
    "CLAIMS_BALANCE_OF_SLOT",
    "POOLS_SLOT",
    "SLOT0_OFFSET",
    "FEE_GROWTH_GLOBAL0_OFFSET",
    "FEE_GROWTH_GLOBAL1_OFFSET",
    "LIQUIDITY_OFFSET",
    "TICKS_OFFSET",
    "TICK_BITMAP_OFFSET",
    "POSITIONS_OFFSET",
    "TICK_INFO_WORDS",
    "POSITION_WORDS",
    "ACCUMULATOR_BITS",
    "MIN_TICK",
    "MAX_TICK",
    "IS_UNLOCKED_LABEL",
    "NONZERO_DELTA_COUNT_LABEL",
    "CURRENCY_LABEL",
    "RESERVES_OF_LABEL",
]

# Native word of the store: one slot holds 256 bits.
WORD_BITS: int = 256
WORD_BYTES: int = WORD_BITS // 8
WORD_MASK: int = (1 << WORD_BITS) - 1
MAX_SLOT: int = WORD_MASK

ADDRESS_BYTES: int = 20

# Store-level roots.
OWNER_SLOT: int = 0
PROTOCOL_FEES_ACCRUED_SLOT: int = 1
PROTOCOL_FEE_CONTROLLER_SLOT: int = 2
CLAIMS_BALANCE_OF_SLOT: int = 4
POOLS_SLOT: int = 6

# Pool record (Pool.State) word offsets.
SLOT0_OFFSET: int = 0
FEE_GROWTH_GLOBAL0_OFFSET: int = 1
FEE_GROWTH_GLOBAL1_OFFSET: int = 2
LIQUIDITY_OFFSET: int = 3
TICKS_OFFSET: int = 4
TICK_BITMAP_OFFSET: int = 5
POSITIONS_OFFSET: int = 6

# Nested record sizes, in words.
TICK_INFO_WORDS: int = 3
POSITION_WORDS: int = 3

# Fee growth accumulators are Q128.128 values spanning a full word.
ACCUMULATOR_BITS: int = 256

MIN_TICK: int = -887272
MAX_TICK: int = 887272

# Transient slots are keccak256(label) - 1.
IS_UNLOCKED_LABEL: bytes = b"Unlocked"
NONZERO_DELTA_COUNT_LABEL: bytes = b"NonzeroDeltaCount"
CURRENCY_LABEL: bytes = b"Currency"
RESERVES_OF_LABEL: bytes = b"ReservesOf"
