"""
The layout version pinned by every published table.

A layout version names one exact arrangement of the store: root slots, record
offsets, field bit positions, and key encodings. Two versions are interchangeable
only when both components are equal; there is no "newer is compatible" rule,
because any moved field silently decodes a different value.

Bumps
- major: a field offset, bit width, signedness, root slot, or key encoding changed.
- minor: a layout or accessor was added without touching existing ones.

The release date travels with LAYOUT_V for humans and does not take part in
comparisons. This module is zero-IO.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from .errors import VersionMismatch

__all__ = ["LayoutVersion", "LAYOUT_V", "is_compatible", "require_compatible"]


@dataclass(frozen=True, order=True)
class LayoutVersion:
    """
    Major/minor pair identifying a layout arrangement.

    Attributes:
        major (int): Breaking-change counter.
        minor (int): Additive-change counter.
        released (str): Optional ISO date; ignored by ``==`` and ordering.

    Raises:
        ValueError: If a component is not a non-negative int or ``released`` is not ISO.

    Examples:
        >>> LayoutVersion.parse("1.0") == LayoutVersion(1, 0, "2026-10-19")
        True
        >>> str(LayoutVersion(2, 3))
        '2.3'
    """

    major: int
    minor: int
    released: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        for part in ("major", "minor"):
            value = getattr(self, part)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"layout {part} must be a non-negative int, got {value!r}")
        if self.released:
            try:
                date.fromisoformat(self.released)
            except ValueError as exc:
                raise ValueError(f"layout release date is not ISO: {self.released!r}") from exc

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"

    @classmethod
    def parse(cls, text: str) -> LayoutVersion:
        """Parse ``"MAJOR.MINOR"``; raises ValueError on anything else."""
        major, sep, minor = text.strip().partition(".")
        if not sep or not major.isdigit() or not minor.isdigit():
            raise ValueError(f"layout version must look like MAJOR.MINOR, got {text!r}")
        return cls(int(major), int(minor))


LAYOUT_V = LayoutVersion(1, 0, "2026-10-19")


def is_compatible(ver: LayoutVersion) -> bool:
    """True when ``ver`` names the same arrangement as LAYOUT_V."""
    return ver == LAYOUT_V


def require_compatible(ver: LayoutVersion, what: str) -> None:
    """
    Raise unless ``ver`` equals LAYOUT_V.

    Args:
        ver (LayoutVersion): Version to check.
        what (str): Who carries the version, for the error message.

    Raises:
        VersionMismatch: If the versions differ.
    """
    if not is_compatible(ver):
        raise VersionMismatch(f"{what} pins layout {ver}, library provides {LAYOUT_V}")
