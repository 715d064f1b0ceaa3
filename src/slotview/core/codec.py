"""
Packed-field codec: bit layouts, decode/encode of single words, and wide accumulators.

Responsibilities
- Describe the fields packed into one word with FieldSpec and PackedLayout.
- Validate layouts once, when the layout object is built (LayoutError), so that
  decode stays a fixed sequence of shifts and masks.
- Decode words into named integers (zero- or sign-extended) and encode them back.
- Reconstruct values wider than one word from an ordered sequence of words.

Conventions
- Bit offsets count from the least-significant end of the word.
- Signed fields use two's complement of exactly ``bit_width`` bits.
- Wide values are split most-significant word first.
- No scaling is applied: a Q64.96 price or a Q128.128 accumulator is returned as
  the raw integer stored in the word.

Examples:
    >>> from slotview.core.codec import FieldSpec, PackedLayout, decode, encode
    >>> layout = PackedLayout("demo", (FieldSpec("a", 8, 0), FieldSpec("b", 8, 8, signed=True)))
    >>> decode(encode({"a": 1, "b": -1}, layout), layout)
    {'a': 1, 'b': -1}
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from .constants import WORD_BITS
from .errors import EncodingError, EncodingMismatchError, LayoutError
from .hashing import from_twos_complement
from .versioning import LAYOUT_V, LayoutVersion

__all__ = [
    "FieldSpec",
    "PackedLayout",
    "decode",
    "decode_field",
    "decode_wide",
    "encode",
    "split_wide",
    "check_roundtrip",
]


@dataclass(frozen=True)
class FieldSpec:
    """
    One field packed inside a word.

    Attributes:
        name (str): Field name (lower_snake).
        bit_width (int): Number of bits occupied by the field (>= 1).
        bit_offset (int): Position of the field's least-significant bit.
        signed (bool): True for two's-complement fields (e.g. ticks, net liquidity).
    """

    name: str
    bit_width: int
    bit_offset: int
    signed: bool = False

    @property
    def mask(self) -> int:
        return (1 << self.bit_width) - 1

    @property
    def end(self) -> int:
        """One past the most-significant bit of the field."""
        return self.bit_offset + self.bit_width

    @property
    def min_value(self) -> int:
        return -(1 << (self.bit_width - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bit_width - 1)) - 1 if self.signed else self.mask


@dataclass(frozen=True)
class PackedLayout:
    """
    Immutable, validated description of the fields packed into one word.

    Attributes:
        name (str): Layout name used in error messages and the layout registry.
        fields (tuple[FieldSpec, ...]): Fields in declaration order.
        word_bits (int): Width of the word the layout describes (default 256).
        version (LayoutVersion): Pinned layout version (default LAYOUT_V).

    Raises:
        LayoutError: On construction, if a field has a non-positive width, a negative
            offset, extends past ``word_bits``, overlaps another field, or reuses a name.

    Notes:
        Gaps between fields are allowed; their bits are ignored by decode and left
        zero by encode.
    """

    name: str
    fields: tuple[FieldSpec, ...]
    word_bits: int = WORD_BITS
    version: LayoutVersion = LAYOUT_V
    covered_mask: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        if self.word_bits <= 0:
            raise LayoutError(f"{self.name}: word_bits must be positive, got {self.word_bits}")
        if not self.fields:
            raise LayoutError(f"{self.name}: layout has no fields")

        seen: set[str] = set()
        covered = 0
        for spec in self.fields:
            if spec.name in seen:
                raise LayoutError(f"{self.name}: duplicate field name {spec.name!r}")
            seen.add(spec.name)
            if spec.bit_width <= 0:
                raise LayoutError(f"{self.name}.{spec.name}: bit_width must be positive")
            if spec.bit_offset < 0:
                raise LayoutError(f"{self.name}.{spec.name}: bit_offset must be non-negative")
            if spec.end > self.word_bits:
                raise LayoutError(
                    f"{self.name}.{spec.name}: bits [{spec.bit_offset}, {spec.end}) "
                    f"exceed word width {self.word_bits}"
                )
            bits = spec.mask << spec.bit_offset
            if covered & bits:
                raise LayoutError(f"{self.name}.{spec.name}: overlaps another field")
            covered |= bits
        object.__setattr__(self, "covered_mask", covered)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    def get_field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.name} has no field {name!r}")


def _check_word(word: int, word_bits: int) -> None:
    if word < 0 or word >> word_bits:
        raise ValueError(f"word does not fit in {word_bits} bits: {word:#x}")


def decode_field(word: int, spec: FieldSpec) -> int:
    """Extract one field from a word, sign-extending when the field is signed."""
    raw = (word >> spec.bit_offset) & spec.mask
    if spec.signed:
        return from_twos_complement(raw, spec.bit_width)
    return raw


def decode(word: int, layout: PackedLayout) -> dict[str, int]:
    """
    Decode a raw word into named field values.

    Args:
        word (int): Unsigned raw word as returned by the store.
        layout (PackedLayout): Validated layout describing the word.

    Returns:
        dict[str, int]: Field name -> value, in layout declaration order.

    Raises:
        ValueError: If the word does not fit in ``layout.word_bits``.

    Notes:
        An all-zero word decodes to all-zero fields; it is valid data.
    """
    _check_word(word, layout.word_bits)
    return {spec.name: decode_field(word, spec) for spec in layout.fields}


def encode(fields: Mapping[str, int], layout: PackedLayout) -> int:
    """
    Pack named field values into a word; the inverse of decode.

    Args:
        fields (Mapping[str, int]): One value per layout field.
        layout (PackedLayout): Validated layout describing the word.

    Returns:
        int: Unsigned word with every field placed at its offset and gaps zeroed.

    Raises:
        EncodingError: If a field is missing, an unknown name is given, or a value
            falls outside its field's range.
    """
    names = set(layout.field_names)
    unknown = set(fields) - names
    if unknown:
        raise EncodingError(f"{layout.name}: unknown fields {sorted(unknown)}")

    word = 0
    for spec in layout.fields:
        if spec.name not in fields:
            raise EncodingError(f"{layout.name}: missing field {spec.name!r}")
        value = int(fields[spec.name])
        if value < spec.min_value or value > spec.max_value:
            kind = "signed" if spec.signed else "unsigned"
            raise EncodingError(
                f"{layout.name}.{spec.name}: {value} does not fit in {spec.bit_width}-bit {kind} field"
            )
        word |= (value & spec.mask) << spec.bit_offset
    return word


def decode_wide(words: Sequence[int], field_width_bits: int, word_bits: int = WORD_BITS) -> int:
    """
    Reconstruct an unsigned value spanning one or more words.

    Args:
        words (Sequence[int]): Raw words, most-significant word first.
        field_width_bits (int): Declared width of the value.
        word_bits (int): Width of each word (the store's native word width).

    Returns:
        int: The concatenated value.

    Raises:
        LayoutError: If the words cannot hold ``field_width_bits`` or none are given.
        ValueError: If a word is out of range or bits above the field width are set.

    Examples:
        >>> decode_wide([1, 0], 256, word_bits=128) == 1 << 128
        True
    """
    if field_width_bits <= 0:
        raise LayoutError(f"field width must be positive, got {field_width_bits}")
    if not words or len(words) * word_bits < field_width_bits:
        raise LayoutError(
            f"{len(words)} word(s) of {word_bits} bits cannot hold a {field_width_bits}-bit field"
        )
    value = 0
    for word in words:
        _check_word(word, word_bits)
        value = (value << word_bits) | word
    if value >> field_width_bits:
        raise ValueError(f"value has bits set above declared width {field_width_bits}")
    return value


def split_wide(value: int, field_width_bits: int, word_bits: int = WORD_BITS) -> list[int]:
    """
    Split an unsigned value into words, most-significant word first; inverse of decode_wide.

    Raises:
        EncodingError: If the value is negative or wider than ``field_width_bits``.
    """
    if value < 0 or value >> field_width_bits:
        raise EncodingError(f"{value} does not fit in {field_width_bits} unsigned bits")
    count = -(-field_width_bits // word_bits)
    mask = (1 << word_bits) - 1
    return [(value >> (word_bits * i)) & mask for i in reversed(range(count))]


def check_roundtrip(word: int, layout: PackedLayout) -> None:
    """
    Assert that re-encoding a decoded word reproduces the layout's covered bits.

    Raises:
        EncodingMismatchError: If ``encode(decode(word))`` differs from the word
            restricted to the bits the layout declares.
    """
    expected = word & layout.covered_mask
    actual = encode(decode(word, layout), layout)
    if actual != expected:
        raise EncodingMismatchError(
            f"{layout.name}: round-trip produced {actual:#x}, expected {expected:#x}"
        )
