import pytest

from slotview.core.codec import check_roundtrip, encode
from slotview.core.constants import WORD_BITS
from slotview.core.layouts import (
    POOL_STATE_RECORD,
    POSITION_RECORD,
    SLOT0_LAYOUT,
    TICK_INFO_RECORD,
    TRANSIENT_LAYOUTS,
    RecordLayout,
    TransientKind,
    get_layout,
    get_record,
    list_layouts,
)
from slotview.core.errors import LayoutError
from slotview.core.versioning import LAYOUT_V


def _is_lower_snake(value: str) -> bool:
    return value == value.lower() and " " not in value and not value.startswith("_")


def test_layouts_contract() -> None:
    for layout in list_layouts():
        assert _is_lower_snake(layout.name)
        assert layout.word_bits == WORD_BITS, f"word width mismatch for {layout.name}"
        assert layout.version == LAYOUT_V, f"version mismatch for {layout.name}"
        for spec in layout.fields:
            assert _is_lower_snake(spec.name), f"field {spec.name!r} not lower_snake in {layout.name}"
            assert spec.end <= layout.word_bits


def test_get_layout_roundtrip() -> None:
    for layout in list_layouts():
        assert get_layout(layout.name) is layout


def test_every_layout_survives_all_ones_roundtrip() -> None:
    all_ones = (1 << WORD_BITS) - 1
    for layout in list_layouts():
        check_roundtrip(all_ones, layout)


def test_slot0_layout_is_published_shape() -> None:
    shape = [(f.name, f.bit_width, f.bit_offset, f.signed) for f in SLOT0_LAYOUT.fields]
    assert shape == [
        ("sqrt_price_x96", 160, 0, False),
        ("tick", 24, 160, True),
        ("protocol_fee", 24, 184, False),
        ("lp_fee", 24, 208, False),
    ]
    # Top 24 bits of slot0 are unused.
    assert SLOT0_LAYOUT.covered_mask == (1 << 232) - 1
    assert encode({"sqrt_price_x96": 0, "tick": 0, "protocol_fee": 0, "lp_fee": 0}, SLOT0_LAYOUT) == 0


def test_pool_record_offsets() -> None:
    assert POOL_STATE_RECORD.members == {
        "slot0": 0,
        "fee_growth_global0_x128": 1,
        "fee_growth_global1_x128": 2,
        "liquidity": 3,
        "ticks": 4,
        "tick_bitmap": 5,
        "positions": 6,
    }
    assert POOL_STATE_RECORD.collections == {"ticks", "tick_bitmap", "positions"}
    assert POOL_STATE_RECORD.version == LAYOUT_V


def test_nested_records_span_three_words() -> None:
    for record in (TICK_INFO_RECORD, POSITION_RECORD):
        assert record.size == 3
        assert sorted(record.members.values()) == [0, 1, 2]


def test_every_transient_kind_has_a_layout() -> None:
    assert set(TRANSIENT_LAYOUTS) == set(TransientKind)
    assert TRANSIENT_LAYOUTS[TransientKind.CURRENCY_DELTA].fields[0].signed is True


def test_get_record() -> None:
    assert get_record("pool_state") is POOL_STATE_RECORD
    assert get_record("tick_info") is TICK_INFO_RECORD
    assert get_record("position") is POSITION_RECORD


@pytest.mark.parametrize(
    "kwargs",
    [
        {"members": {"a": 0, "b": 0}, "size": 2},
        {"members": {"a": 5}, "size": 1},
        {"members": {"a": -1}, "size": 1},
        {"members": {"a": 0}, "collections": frozenset({"b"}), "size": 1},
        {"members": {"a": 0}, "size": 0},
        {"members": {}, "size": 1},
    ],
)
def test_malformed_records_raise(kwargs: dict) -> None:
    with pytest.raises(LayoutError):
        RecordLayout("bad", **kwargs)


def test_record_with_gaps_is_valid() -> None:
    record = RecordLayout("sparse", {"head": 0, "tail": 3}, size=4)
    assert record.offset("tail") == 3


def test_published_tables_are_read_only() -> None:
    with pytest.raises(TypeError):
        POOL_STATE_RECORD.members["ticks"] = 5  # type: ignore[index]
    with pytest.raises(TypeError):
        TRANSIENT_LAYOUTS[TransientKind.CURRENCY_DELTA] = SLOT0_LAYOUT  # type: ignore[index]
    assert POOL_STATE_RECORD.offset("ticks") == 4


def test_record_copies_caller_mapping() -> None:
    members = {"a": 0, "b": 1}
    record = RecordLayout("copy", members, size=2)
    members["a"] = 1
    assert record.offset("a") == 0
