"""
Pydantic v2 model for the canonical pool description, identifier and key builders,
and the typed result records returned by the reader.

Responsibilities
- PoolKey: validated canonical description of a pool; two equal descriptions always
  produce the same PoolId.
- pool_id / position_key / currency_delta_key: deterministic 32-byte keys whose byte
  encodings are part of the public contract.
- Result records (named tuples) so accessors compare equal to plain tuples.

Key encodings (byte order is contract; any change is a major LAYOUT_V bump)
- pool_id:            keccak256(pad32(currency0) ‖ pad32(currency1) ‖ uint24 fee ‖ int24 tick_spacing ‖ pad32(hooks))
                      with every member a full 32-byte word (abi.encode).
- position_key:       keccak256(owner[20] ‖ int24 tick_lower[3] ‖ int24 tick_upper[3] ‖ salt[32])
                      tightly packed, 58 bytes (abi.encodePacked).
- currency_delta_key: keccak256(pad32(target) ‖ pad32(currency)).

Style
- Zero-IO (stdlib + pydantic + pycryptodome via slotview.core.hashing).
"""

from __future__ import annotations

from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .constants import ADDRESS_BYTES, WORD_BYTES
from .errors import AddressError
from .hashing import (
    address_bytes,
    as_bytes32,
    int_to_word_bytes,
    keccak256,
    to_twos_complement,
    word_to_bytes,
)
from .typing import BytesLike, PoolId, PositionKey

__all__ = [
    "ZERO_ADDRESS",
    "PoolKey",
    "pool_id",
    "position_key",
    "currency_delta_key",
    "Slot0",
    "TickLiquidity",
    "FeeGrowthOutside",
    "TickInfo",
    "PositionInfo",
    "FeeGrowthGlobals",
]

ZERO_ADDRESS = "0x" + "00" * ADDRESS_BYTES

_UINT24_MAX = (1 << 24) - 1
_INT24_MIN = -(1 << 23)
_INT24_MAX = (1 << 23) - 1


class PoolKey(BaseModel):
    """
    Canonical description of a pool.

    Attributes:
        currency0 (str): Lower-sorted currency address (zero address for the native currency).
        currency1 (str): Higher-sorted currency address.
        fee (int): uint24 LP fee in hundredths of a bip, or the dynamic-fee flag.
        tick_spacing (int): int24 tick spacing.
        hooks (str): Hooks contract address (zero address when none).

    Raises:
        pydantic.ValidationError: If an address is malformed, currency0 does not sort
            strictly below currency1, or fee/tick_spacing fall outside their widths.

    Notes:
        Addresses are normalized to lowercase 0x-prefixed hex so that equal pools
        written with different casing compare equal and hash identically.

    Examples:
        >>> from slotview.core.schema import PoolKey, pool_id
        >>> key = PoolKey(currency0="0x" + "00" * 20, currency1="0x" + "11" * 20, fee=3000, tick_spacing=60)
        >>> len(pool_id(key))
        32
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    currency0: str
    currency1: str
    fee: int
    tick_spacing: int
    hooks: str = ZERO_ADDRESS

    @field_validator("currency0", "currency1", "hooks", mode="before")
    @classmethod
    def _normalize_address(cls, v: Any) -> str:
        try:
            return "0x" + address_bytes(v).hex()
        except TypeError as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("fee")
    @classmethod
    def _fee_is_uint24(cls, v: int) -> int:
        if v < 0 or v > _UINT24_MAX:
            raise ValueError(f"fee must fit in uint24, got {v}")
        return v

    @field_validator("tick_spacing")
    @classmethod
    def _tick_spacing_is_int24(cls, v: int) -> int:
        if v < _INT24_MIN or v > _INT24_MAX:
            raise ValueError(f"tick_spacing must fit in int24, got {v}")
        return v

    @model_validator(mode="after")
    def _currencies_sorted(self) -> PoolKey:
        if int(self.currency0, 16) >= int(self.currency1, 16):
            raise ValueError("currency0 must sort strictly below currency1")
        return self

    def abi_encode(self) -> bytes:
        """Return the 160-byte abi.encode of the key (five 32-byte words)."""
        return b"".join(
            (
                _pad_address(self.currency0),
                _pad_address(self.currency1),
                word_to_bytes(self.fee),
                int_to_word_bytes(self.tick_spacing),
                _pad_address(self.hooks),
            )
        )


def _pad_address(value: BytesLike | str | int) -> bytes:
    return address_bytes(value).rjust(WORD_BYTES, b"\x00")


def pool_id(key: PoolKey) -> PoolId:
    """
    Derive the 32-byte PoolId from a PoolKey.

    Args:
        key (PoolKey): Validated pool description.

    Returns:
        PoolId: keccak256 of the key's ABI encoding.
    """
    return PoolId(keccak256(key.abi_encode()))


def position_key(
    owner: BytesLike | str | int,
    tick_lower: int,
    tick_upper: int,
    salt: BytesLike | str | int = 0,
) -> PositionKey:
    """
    Derive the 32-byte position key for (owner, tick_lower, tick_upper, salt).

    Args:
        owner: Owner address (20 bytes, hex string, or int).
        tick_lower (int): Lower tick bound (int24).
        tick_upper (int): Upper tick bound (int24).
        salt: 32-byte salt (bytes or hex) or an unsigned int below 2**256.

    Returns:
        PositionKey: keccak256 over the 58-byte packed encoding.

    Raises:
        AddressError: If a tick does not fit in int24 or the salt is malformed.
    """
    try:
        lower = to_twos_complement(tick_lower, 24).to_bytes(3, "big")
        upper = to_twos_complement(tick_upper, 24).to_bytes(3, "big")
        salt_bytes = word_to_bytes(salt) if isinstance(salt, int) else as_bytes32(salt, name="salt")
        owner_bytes = address_bytes(owner, name="owner")
    except (TypeError, ValueError) as exc:
        raise AddressError(f"cannot encode position key: {exc}") from exc
    return PositionKey(keccak256(owner_bytes + lower + upper + salt_bytes))


def currency_delta_key(target: BytesLike | str | int, currency: BytesLike | str | int) -> bytes:
    """
    Derive the transient-region key holding ``target``'s outstanding delta in ``currency``.

    Returns:
        bytes: keccak256(pad32(target) ‖ pad32(currency)).
    """
    try:
        return keccak256(_pad_address(target) + _pad_address(currency))
    except (TypeError, ValueError) as exc:
        raise AddressError(f"cannot encode currency delta key: {exc}") from exc


# ============================================================================
# Result records
# ============================================================================


class Slot0(NamedTuple):
    sqrt_price_x96: int
    tick: int
    protocol_fee: int
    lp_fee: int


class TickLiquidity(NamedTuple):
    liquidity_gross: int
    liquidity_net: int


class FeeGrowthOutside(NamedTuple):
    fee_growth_outside0_x128: int
    fee_growth_outside1_x128: int


class TickInfo(NamedTuple):
    liquidity_gross: int
    liquidity_net: int
    fee_growth_outside0_x128: int
    fee_growth_outside1_x128: int


class PositionInfo(NamedTuple):
    liquidity: int
    fee_growth_inside0_last_x128: int
    fee_growth_inside1_last_x128: int


class FeeGrowthGlobals(NamedTuple):
    fee_growth_global0_x128: int
    fee_growth_global1_x128: int
