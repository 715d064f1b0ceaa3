"""
Core exception types raised by layout validation, the packed-field codec, and address derivation.

Provides typed exceptions for core-domain failures:
- LayoutError for overlapping, oversized, or otherwise malformed layout tables.
- EncodingError when a value does not fit the bit width declared for its field.
- EncodingMismatchError when encode(decode(word)) does not reproduce the word.
- AddressError for address arithmetic that would leave the 256-bit slot space or
  for keys that cannot be encoded into a hash input.
- VersionMismatch for layout version incompatibilities against LAYOUT_V.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - LayoutError is raised at import time by slotview.core.layouts when a constant
      table is defective; it indicates a programming error, not a runtime condition.
    - Store failures are IO-layer concerns and live in slotview.io.errors.

Examples:
    Catch a width violation while packing a word.

    >>> from slotview.core.codec import FieldSpec, PackedLayout, encode
    >>> from slotview.core.errors import EncodingError
    >>> layout = PackedLayout("demo", (FieldSpec("fee", 24, 0),))
    >>> try:
    ...     encode({"fee": 1 << 24}, layout)
    ... except EncodingError as e:
    ...     msg = str(e)
    >>> "does not fit" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "LayoutError",
    "EncodingError",
    "EncodingMismatchError",
    "AddressError",
    "VersionMismatch",
]


class LayoutError(ValueError):
    """Layout table defect (overlapping fields, field outside the word, bad width, duplicate name)."""


class EncodingError(ValueError):
    """Value cannot be packed into its field (out of range, missing, or unknown field name)."""


class EncodingMismatchError(RuntimeError):
    """Round-trip defect: re-encoding a decoded word did not reproduce the original bits."""


class AddressError(ValueError):
    """Address arithmetic left the slot space, or a collection key could not be encoded."""


class VersionMismatch(RuntimeError):
    """Incompatible or unexpected layout version encountered."""
