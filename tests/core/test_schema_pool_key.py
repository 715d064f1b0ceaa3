import pytest
from pydantic import ValidationError

from slotview.core.errors import AddressError
from slotview.core.hashing import keccak256
from slotview.core.schema import PoolKey, currency_delta_key, pool_id, position_key

ETH = "0x" + "00" * 20
TOKEN = "0x" + "aa" * 20


def test_pool_id_is_keccak_of_abi_encoding(pool_key: PoolKey) -> None:
    encoded = (
        b"\x00" * 32
        + b"\x00" * 12
        + b"\xaa" * 20
        + (3000).to_bytes(32, "big")
        + (60).to_bytes(32, "big")
        + b"\x00" * 32
    )
    assert pool_key.abi_encode() == encoded
    assert pool_id(pool_key) == keccak256(encoded)


def test_equal_descriptions_share_an_identifier() -> None:
    a = PoolKey(currency0=ETH, currency1=TOKEN, fee=500, tick_spacing=10)
    b = PoolKey(currency0=b"\x00" * 20, currency1="0x" + "AA" * 20, fee=500, tick_spacing=10)
    assert a == b
    assert pool_id(a) == pool_id(b)


def test_any_parameter_change_changes_identifier() -> None:
    base = PoolKey(currency0=ETH, currency1=TOKEN, fee=500, tick_spacing=10)
    variants = [
        base.model_copy(update={"fee": 3000}),
        base.model_copy(update={"tick_spacing": 60}),
        base.model_copy(update={"hooks": "0x" + "01" * 20}),
    ]
    ids = {pool_id(base)} | {pool_id(v) for v in variants}
    assert len(ids) == 4


def test_negative_tick_spacing_is_sign_extended() -> None:
    key = PoolKey(currency0=ETH, currency1=TOKEN, fee=0, tick_spacing=-1)
    assert key.abi_encode()[96:128] == b"\xff" * 32


@pytest.mark.parametrize(
    "kwargs",
    [
        {"currency0": TOKEN, "currency1": ETH, "fee": 500, "tick_spacing": 10},
        {"currency0": ETH, "currency1": ETH, "fee": 500, "tick_spacing": 10},
        {"currency0": ETH, "currency1": TOKEN, "fee": 1 << 24, "tick_spacing": 10},
        {"currency0": ETH, "currency1": TOKEN, "fee": 500, "tick_spacing": 1 << 23},
        {"currency0": "0x1234", "currency1": TOKEN, "fee": 500, "tick_spacing": 10},
        {"currency0": ETH, "currency1": TOKEN, "fee": 500, "tick_spacing": 10, "extra": 1},
    ],
)
def test_pool_key_validation(kwargs: dict) -> None:
    with pytest.raises(ValidationError):
        PoolKey(**kwargs)


def test_position_key_packs_owner_ticks_salt_in_order() -> None:
    owner = b"\xab" * 20
    packed = owner + (0xFFFF88).to_bytes(3, "big") + (120).to_bytes(3, "big") + b"\x00" * 32
    assert len(packed) == 58
    assert position_key(owner, -120, 120, b"\x00" * 32) == keccak256(packed)
    assert position_key(owner, -120, 120, 0) == keccak256(packed)
    # Swapping the bounds is a different position.
    assert position_key(owner, 120, -120, 0) != position_key(owner, -120, 120, 0)


def test_position_key_rejects_bad_inputs() -> None:
    with pytest.raises(AddressError):
        position_key(b"\xab" * 20, -(1 << 23) - 1, 0)
    with pytest.raises(AddressError):
        position_key(b"\xab" * 19, 0, 60)
    with pytest.raises(AddressError):
        position_key(b"\xab" * 20, 0, 60, b"\x01")


def test_currency_delta_key_is_padded_target_then_currency() -> None:
    target = b"\x01" * 20
    currency = b"\x02" * 20
    expected = keccak256(b"\x00" * 12 + target + b"\x00" * 12 + currency)
    assert currency_delta_key(target, currency) == expected
    assert currency_delta_key(currency, target) != expected
