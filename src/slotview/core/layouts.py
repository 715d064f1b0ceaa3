"""
Published layout tables for the pool-manager store.

Two kinds of constant tables live here:
- PackedLayout instances describing how fields are packed inside one word.
- RecordLayout instances describing which word offset holds each member of a
  record (a pool, a tick, a position), including members that are keyed
  collections and therefore only serve as a parent address for derivation.

Notes:
    - Every table pins LAYOUT_V. Layouts are validated when this module is imported;
      a defective table raises LayoutError before any read is attempted.
    - Word-level layouts match the store's declarations bit for bit:
        slot0:            sqrt_price_x96 u160 @0 | tick i24 @160 | protocol_fee u24 @184 | lp_fee u24 @208
        tick liquidity:   liquidity_gross u128 @0 | liquidity_net i128 @128
        liquidity words:  u128 @0 (upper 128 bits unused)
    - Fee growth accumulators occupy a whole word and are read with decode_wide.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from .codec import FieldSpec, PackedLayout
from .constants import (
    ADDRESS_BYTES,
    FEE_GROWTH_GLOBAL0_OFFSET,
    FEE_GROWTH_GLOBAL1_OFFSET,
    LIQUIDITY_OFFSET,
    POSITION_WORDS,
    POSITIONS_OFFSET,
    SLOT0_OFFSET,
    TICK_BITMAP_OFFSET,
    TICK_INFO_WORDS,
    TICKS_OFFSET,
    WORD_BITS,
)
from .errors import LayoutError
from .versioning import LAYOUT_V, LayoutVersion

__all__ = [
    "RecordLayout",
    "TransientKind",
    "SLOT0_LAYOUT",
    "LIQUIDITY_LAYOUT",
    "TICK_LIQUIDITY_LAYOUT",
    "POSITION_LIQUIDITY_LAYOUT",
    "UINT256_LAYOUT",
    "INT256_LAYOUT",
    "ADDRESS_LAYOUT",
    "BOOL_LAYOUT",
    "POOL_STATE_RECORD",
    "TICK_INFO_RECORD",
    "POSITION_RECORD",
    "TRANSIENT_LAYOUTS",
    "get_layout",
    "list_layouts",
    "get_record",
    "published_versions",
]


@dataclass(frozen=True)
class RecordLayout:
    """
    Word offsets of the members of a fixed-layout record.

    Attributes:
        name (str): Record name.
        members (Mapping[str, int]): Member name -> word offset from the record base.
            Stored read-only.
        collections (frozenset[str]): Members that are keyed collections; their
            offset is the parent address for collection_entry_address.
        size (int): Number of consecutive words the record occupies.
        version (LayoutVersion): Pinned layout version.

    Raises:
        LayoutError: On construction, if the size is not positive, two members share
            an offset, an offset falls outside ``[0, size)``, or a collection is not
            a member.
    """

    name: str
    members: Mapping[str, int]
    collections: frozenset[str] = frozenset()
    size: int = 1
    version: LayoutVersion = LAYOUT_V

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", MappingProxyType(dict(self.members)))
        object.__setattr__(self, "collections", frozenset(self.collections))
        if self.size <= 0:
            raise LayoutError(f"{self.name}: size must be positive, got {self.size}")
        if not self.members:
            raise LayoutError(f"{self.name}: record has no members")

        taken: dict[int, str] = {}
        for member, offset in self.members.items():
            if offset < 0 or offset >= self.size:
                raise LayoutError(
                    f"{self.name}.{member}: offset {offset} outside [0, {self.size})"
                )
            if offset in taken:
                raise LayoutError(
                    f"{self.name}.{member}: offset {offset} already used by {taken[offset]!r}"
                )
            taken[offset] = member
        unknown = self.collections - set(self.members)
        if unknown:
            raise LayoutError(f"{self.name}: collections {sorted(unknown)} are not members")

    def offset(self, member: str) -> int:
        return self.members[member]


# -----------------------------------------------------------------------------
# Word layouts
# -----------------------------------------------------------------------------

SLOT0_LAYOUT = PackedLayout(
    name="slot0",
    fields=(
        FieldSpec("sqrt_price_x96", 160, 0),
        FieldSpec("tick", 24, 160, signed=True),
        FieldSpec("protocol_fee", 24, 184),
        FieldSpec("lp_fee", 24, 208),
    ),
)

LIQUIDITY_LAYOUT = PackedLayout(
    name="liquidity",
    fields=(FieldSpec("liquidity", 128, 0),),
)

TICK_LIQUIDITY_LAYOUT = PackedLayout(
    name="tick_liquidity",
    fields=(
        FieldSpec("liquidity_gross", 128, 0),
        FieldSpec("liquidity_net", 128, 128, signed=True),
    ),
)

POSITION_LIQUIDITY_LAYOUT = PackedLayout(
    name="position_liquidity",
    fields=(FieldSpec("liquidity", 128, 0),),
)

UINT256_LAYOUT = PackedLayout(name="uint256", fields=(FieldSpec("value", WORD_BITS, 0),))

INT256_LAYOUT = PackedLayout(
    name="int256",
    fields=(FieldSpec("value", WORD_BITS, 0, signed=True),),
)

ADDRESS_LAYOUT = PackedLayout(
    name="address",
    fields=(FieldSpec("value", ADDRESS_BYTES * 8, 0),),
)

BOOL_LAYOUT = PackedLayout(name="bool", fields=(FieldSpec("value", 8, 0),))


# -----------------------------------------------------------------------------
# Record layouts
# -----------------------------------------------------------------------------

POOL_STATE_RECORD = RecordLayout(
    name="pool_state",
    members={
        "slot0": SLOT0_OFFSET,
        "fee_growth_global0_x128": FEE_GROWTH_GLOBAL0_OFFSET,
        "fee_growth_global1_x128": FEE_GROWTH_GLOBAL1_OFFSET,
        "liquidity": LIQUIDITY_OFFSET,
        "ticks": TICKS_OFFSET,
        "tick_bitmap": TICK_BITMAP_OFFSET,
        "positions": POSITIONS_OFFSET,
    },
    collections=frozenset({"ticks", "tick_bitmap", "positions"}),
    size=POSITIONS_OFFSET + 1,
)

TICK_INFO_RECORD = RecordLayout(
    name="tick_info",
    members={
        "liquidity": 0,
        "fee_growth_outside0_x128": 1,
        "fee_growth_outside1_x128": 2,
    },
    size=TICK_INFO_WORDS,
)

POSITION_RECORD = RecordLayout(
    name="position",
    members={
        "liquidity": 0,
        "fee_growth_inside0_last_x128": 1,
        "fee_growth_inside1_last_x128": 2,
    },
    size=POSITION_WORDS,
)


# -----------------------------------------------------------------------------
# Transient region
# -----------------------------------------------------------------------------


class TransientKind(Enum):
    """
    Transient-region values readable through exttload.

    Notes:
        CURRENCY_DELTA is the only keyed kind; its identifier is the 32-byte key
        from slotview.core.schema.currency_delta_key. The others are singletons.
    """

    IS_UNLOCKED = "is_unlocked"
    NONZERO_DELTA_COUNT = "nonzero_delta_count"
    SYNCED_CURRENCY = "synced_currency"
    SYNCED_RESERVES = "synced_reserves"
    CURRENCY_DELTA = "currency_delta"


TRANSIENT_LAYOUTS: Mapping[TransientKind, PackedLayout] = MappingProxyType(
    {
        TransientKind.IS_UNLOCKED: BOOL_LAYOUT,
        TransientKind.NONZERO_DELTA_COUNT: UINT256_LAYOUT,
        TransientKind.SYNCED_CURRENCY: ADDRESS_LAYOUT,
        TransientKind.SYNCED_RESERVES: UINT256_LAYOUT,
        TransientKind.CURRENCY_DELTA: INT256_LAYOUT,
    }
)


# Registry
_LAYOUTS: dict[str, PackedLayout] = {
    layout.name: layout
    for layout in (
        SLOT0_LAYOUT,
        LIQUIDITY_LAYOUT,
        TICK_LIQUIDITY_LAYOUT,
        POSITION_LIQUIDITY_LAYOUT,
        UINT256_LAYOUT,
        INT256_LAYOUT,
        ADDRESS_LAYOUT,
        BOOL_LAYOUT,
    )
}


def get_layout(name: str) -> PackedLayout:
    """
    Look up a word layout by name.

    Args:
        name (str): Layout name (e.g. "slot0").

    Returns:
        PackedLayout: The registered layout.
    """
    return _LAYOUTS[name]


def list_layouts() -> list[PackedLayout]:
    """Return all registered word layouts in registry order."""
    return list(_LAYOUTS.values())


_RECORDS: dict[str, RecordLayout] = {
    record.name: record for record in (POOL_STATE_RECORD, TICK_INFO_RECORD, POSITION_RECORD)
}


def get_record(name: str) -> RecordLayout:
    """Look up a record layout by name (e.g. "pool_state")."""
    return _RECORDS[name]


def published_versions() -> dict[str, LayoutVersion]:
    """
    Version pinned by every published table, word layouts and records alike.

    Returns:
        dict[str, LayoutVersion]: Table name -> pinned version. Word layouts and
        records live in separate namespaces, so record names are prefixed "record:".
    """
    versions = {layout.name: layout.version for layout in _LAYOUTS.values()}
    versions.update({f"record:{r.name}": r.version for r in _RECORDS.values()})
    return versions
