"""
Slot derivation: base, field, and keyed-collection entry addresses.

The store is one flat arena of 256-bit words. Records and nested collections are
located only through the functions in this module:

- base_address(pool_id)                    = keccak256(pool_id ‖ pad32(POOLS_SLOT))
- field_address(base, offset)              = base + offset, bounded to the slot space
- collection_entry_address(parent, key)    = keccak256(encode_key(key) ‖ pad32(parent))

The hash input is always key first, then parent address. Nested collections chain
the derivation: the entry address of the outer collection is the parent address of
the inner one.

Key encoding (encode_key)
- int: signed, 256-bit two's complement (an int24 tick -1 encodes as 32 bytes of 0xff).
- bytes: up to 32 bytes, left-padded with zeros (addresses, 32-byte ids).

All functions are pure and safe to call from any thread.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from .constants import (
    CLAIMS_BALANCE_OF_SLOT,
    CURRENCY_LABEL,
    IS_UNLOCKED_LABEL,
    MAX_SLOT,
    NONZERO_DELTA_COUNT_LABEL,
    POOLS_SLOT,
    PROTOCOL_FEES_ACCRUED_SLOT,
    RESERVES_OF_LABEL,
    WORD_BYTES,
)
from .errors import AddressError
from .hashing import address_bytes, as_bytes32, int_to_word_bytes, keccak_int, word_to_bytes
from .layouts import POOL_STATE_RECORD, TransientKind
from .schema import PoolKey, currency_delta_key, pool_id, position_key
from .typing import BytesLike, CollectionKey, PoolId, Slot

__all__ = [
    "encode_key",
    "base_address",
    "field_address",
    "collection_entry_address",
    "pool_state_slot",
    "tick_info_slot",
    "tick_bitmap_slot",
    "position_info_slot",
    "protocol_fees_slot",
    "claims_balance_slot",
    "transient_slot",
    "currency_delta_slot",
    "transient_kind_slot",
]

_INT24_MIN = -(1 << 23)
_INT24_MAX = (1 << 23) - 1
_INT16_MIN = -(1 << 15)
_INT16_MAX = (1 << 15) - 1


def _check_slot(slot: int, what: str = "slot") -> None:
    if slot < 0 or slot > MAX_SLOT:
        raise AddressError(f"{what} outside the 256-bit slot space: {slot}")


def encode_key(key: CollectionKey) -> bytes:
    """
    Encode a collection key as the 32-byte word placed first in the hash input.

    Args:
        key: Signed int (int256 range) or up to 32 bytes.

    Returns:
        bytes: 32-byte encoding.

    Raises:
        AddressError: If the int does not fit in int256 or the bytes exceed 32.
    """
    if isinstance(key, bool):
        raise AddressError("collection key must not be bool")
    if isinstance(key, int):
        try:
            return int_to_word_bytes(key)
        except ValueError as exc:
            raise AddressError(f"collection key {key} does not fit in int256") from exc
    if isinstance(key, (bytes, bytearray, memoryview)):
        raw = bytes(key)
        if len(raw) > WORD_BYTES:
            raise AddressError(f"collection key longer than {WORD_BYTES} bytes: {len(raw)}")
        return raw.rjust(WORD_BYTES, b"\x00")
    raise AddressError(f"unsupported collection key type {type(key).__name__}")


def base_address(identifier: PoolId | BytesLike | str) -> Slot:
    """
    Base address of a pool record.

    Args:
        identifier: 32-byte PoolId (bytes or 0x-prefixed hex).

    Returns:
        Slot: keccak256(pool_id ‖ pad32(POOLS_SLOT)).

    Examples:
        >>> from slotview.core.slots import base_address
        >>> base_address(b"\\x00" * 32) == base_address("0x" + "00" * 32)
        True
    """
    try:
        raw = as_bytes32(identifier, name="pool id")
    except (TypeError, ValueError) as exc:
        raise AddressError(str(exc)) from exc
    return collection_entry_address(POOLS_SLOT, raw)


def field_address(base: int, field_offset: int) -> Slot:
    """
    Address of the word ``field_offset`` words after ``base``.

    Raises:
        AddressError: If the offset is negative or the result leaves the slot space.
    """
    _check_slot(base, "base address")
    if field_offset < 0:
        raise AddressError(f"field offset must be non-negative, got {field_offset}")
    slot = base + field_offset
    _check_slot(slot, "field address")
    return Slot(slot)


def collection_entry_address(parent_collection_base: int, key: CollectionKey) -> Slot:
    """
    Address of the entry for ``key`` in the collection rooted at ``parent_collection_base``.

    Args:
        parent_collection_base (int): Address of the collection member itself (for a
            collection nested in a record, the record base plus the member offset; for a
            collection nested in another collection, the outer entry address).
        key: Collection key (see encode_key).

    Returns:
        Slot: keccak256(encode_key(key) ‖ pad32(parent_collection_base)).
    """
    _check_slot(parent_collection_base, "collection base")
    return Slot(keccak_int(encode_key(key) + word_to_bytes(parent_collection_base)))


def _resolve(pool: PoolKey | PoolId | BytesLike | str) -> PoolId | BytesLike | str:
    return pool_id(pool) if isinstance(pool, PoolKey) else pool


def pool_state_slot(pool: PoolKey | PoolId | BytesLike | str) -> Slot:
    """Base address of the pool record for a PoolKey or PoolId."""
    return base_address(_resolve(pool))


def tick_info_slot(pool: PoolKey | PoolId | BytesLike | str, tick: int) -> Slot:
    """
    First word of the TickInfo record for ``tick`` (int24) in the pool's ticks collection.

    Raises:
        AddressError: If tick does not fit in int24.
    """
    if isinstance(tick, bool) or tick < _INT24_MIN or tick > _INT24_MAX:
        raise AddressError(f"tick must fit in int24, got {tick}")
    ticks = field_address(pool_state_slot(pool), POOL_STATE_RECORD.offset("ticks"))
    return collection_entry_address(ticks, tick)


def tick_bitmap_slot(pool: PoolKey | PoolId | BytesLike | str, word_position: int) -> Slot:
    """
    Address of the tick bitmap word at ``word_position`` (int16).

    Raises:
        AddressError: If word_position does not fit in int16.
    """
    if isinstance(word_position, bool) or word_position < _INT16_MIN or word_position > _INT16_MAX:
        raise AddressError(f"word position must fit in int16, got {word_position}")
    bitmap = field_address(pool_state_slot(pool), POOL_STATE_RECORD.offset("tick_bitmap"))
    return collection_entry_address(bitmap, word_position)


def position_info_slot(
    pool: PoolKey | PoolId | BytesLike | str,
    key: BytesLike | str | None = None,
    *,
    owner: BytesLike | str | int | None = None,
    tick_lower: int | None = None,
    tick_upper: int | None = None,
    salt: BytesLike | str | int = 0,
) -> Slot:
    """
    First word of the position record, given either a 32-byte position key or its parts.

    Args:
        pool: PoolKey or PoolId.
        key: Precomputed 32-byte position key. Mutually exclusive with owner/ticks.
        owner, tick_lower, tick_upper, salt: Parts hashed by position_key.

    Raises:
        AddressError: If neither or both forms are given, or the key is malformed.
    """
    parts_given = owner is not None or tick_lower is not None or tick_upper is not None
    if key is None:
        if owner is None or tick_lower is None or tick_upper is None:
            raise AddressError("position requires a key or owner, tick_lower and tick_upper")
        raw = position_key(owner, tick_lower, tick_upper, salt)
    else:
        if parts_given:
            raise AddressError("pass either a position key or its parts, not both")
        try:
            raw = as_bytes32(key, name="position key")
        except (TypeError, ValueError) as exc:
            raise AddressError(str(exc)) from exc
    positions = field_address(pool_state_slot(pool), POOL_STATE_RECORD.offset("positions"))
    return collection_entry_address(positions, raw)


def protocol_fees_slot(currency: BytesLike | str | int) -> Slot:
    """Address of the protocol fees accrued for ``currency``."""
    return collection_entry_address(PROTOCOL_FEES_ACCRUED_SLOT, _address_key(currency))


def claims_balance_slot(owner: BytesLike | str | int, token_id: int) -> Slot:
    """
    Address of ``owner``'s claim balance for ``token_id`` (two nesting levels).

    The owner's entry in the balances collection is the parent of the id collection.
    """
    if isinstance(token_id, bool) or token_id < 0 or token_id > MAX_SLOT:
        raise AddressError(f"token id must fit in uint256, got {token_id}")
    per_owner = collection_entry_address(CLAIMS_BALANCE_OF_SLOT, _address_key(owner))
    return collection_entry_address(per_owner, word_to_bytes(token_id))


def _address_key(value: BytesLike | str | int) -> bytes:
    try:
        return address_bytes(value)
    except (TypeError, ValueError) as exc:
        raise AddressError(str(exc)) from exc


def transient_slot(label: bytes) -> Slot:
    """Transient slot for a named singleton value: keccak256(label) - 1."""
    return Slot(keccak_int(label) - 1)


def currency_delta_slot(target: BytesLike | str | int, currency: BytesLike | str | int) -> Slot:
    """Transient slot of ``target``'s delta in ``currency``."""
    return Slot(int.from_bytes(currency_delta_key(target, currency), "big"))


_TRANSIENT_LABELS: Mapping[TransientKind, bytes] = MappingProxyType(
    {
        TransientKind.IS_UNLOCKED: IS_UNLOCKED_LABEL,
        TransientKind.NONZERO_DELTA_COUNT: NONZERO_DELTA_COUNT_LABEL,
        TransientKind.SYNCED_CURRENCY: CURRENCY_LABEL,
        TransientKind.SYNCED_RESERVES: RESERVES_OF_LABEL,
    }
)


def transient_kind_slot(kind: TransientKind, identifier: BytesLike | str | None = None) -> Slot:
    """
    Transient slot for ``kind``.

    Args:
        kind (TransientKind): Value to locate.
        identifier: For CURRENCY_DELTA, the 32-byte key from currency_delta_key;
            must be None for every other kind.

    Raises:
        AddressError: If the identifier is missing for a keyed kind or given for a singleton.
    """
    if kind is TransientKind.CURRENCY_DELTA:
        if identifier is None:
            raise AddressError("currency delta requires a currency_delta_key identifier")
        try:
            return Slot(int.from_bytes(as_bytes32(identifier, name="delta key"), "big"))
        except (TypeError, ValueError) as exc:
            raise AddressError(str(exc)) from exc
    if identifier is not None:
        raise AddressError(f"{kind.value} is a singleton and takes no identifier")
    return transient_slot(_TRANSIENT_LABELS[kind])
