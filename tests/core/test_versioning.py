"""Tests for `slotview.core.versioning`."""

import pytest

from slotview.core.errors import VersionMismatch
from slotview.core.layouts import published_versions
from slotview.core.versioning import LAYOUT_V, LayoutVersion, is_compatible, require_compatible


def test_release_date_does_not_affect_identity() -> None:
    assert LayoutVersion(1, 0, "2026-10-19") == LayoutVersion(1, 0, "2030-01-01")
    assert LayoutVersion(1, 0) == LAYOUT_V


def test_versions_order_by_major_then_minor() -> None:
    assert LayoutVersion(1, 9) < LayoutVersion(2, 0) < LayoutVersion(2, 1)


@pytest.mark.parametrize("text,expected", [("1.0", (1, 0)), (" 3.12 ", (3, 12))])
def test_parse(text: str, expected: tuple[int, int]) -> None:
    ver = LayoutVersion.parse(text)
    assert (ver.major, ver.minor) == expected
    assert str(ver) == f"{expected[0]}.{expected[1]}"


@pytest.mark.parametrize("text", ["1", "1.", ".0", "1.0.0", "v1.0", "-1.0", ""])
def test_parse_rejects_malformed(text: str) -> None:
    with pytest.raises(ValueError):
        LayoutVersion.parse(text)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"major": -1, "minor": 0},
        {"major": 1, "minor": -1},
        {"major": True, "minor": 0},
        {"major": 1, "minor": 0, "released": "2026/10/19"},
    ],
)
def test_invalid_versions_are_rejected(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        LayoutVersion(**kwargs)


def test_only_the_exact_version_is_compatible() -> None:
    assert is_compatible(LAYOUT_V)
    assert not is_compatible(LayoutVersion(LAYOUT_V.major, LAYOUT_V.minor + 1))
    assert not is_compatible(LayoutVersion(LAYOUT_V.major + 1, 0))


def test_require_compatible_names_the_holder() -> None:
    require_compatible(LAYOUT_V, "settings")
    with pytest.raises(VersionMismatch, match="table slot0 pins layout 2.0"):
        require_compatible(LayoutVersion(2, 0), "table slot0")


def test_every_published_table_pins_layout_v() -> None:
    versions = published_versions()
    assert "slot0" in versions and "record:pool_state" in versions
    assert set(versions.values()) == {LAYOUT_V}
