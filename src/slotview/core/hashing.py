"""
Keccak-256 hashing and fixed-width byte encoding helpers.

Provides the single hash function used for every derived address and identifier,
plus the 32-byte word encodings that form hash inputs. All helpers are pure and
deterministic across processes and machines.

Notes:
    - The hash is Ethereum's keccak-256 (original Keccak padding), NOT NIST SHA3-256;
      hashlib.sha3_256 produces different digests and must not be substituted.
    - Words are encoded big-endian, 32 bytes. Signed integers are encoded as 256-bit
      two's complement (Solidity's int256 sign extension).
    - Addresses are 20 bytes; they are left-padded with zeros when used as a word.

Examples:
    >>> from slotview.core.hashing import keccak256
    >>> keccak256(b"").hex()[:16]
    'c5d2460186f7233c'
"""

from __future__ import annotations

from Crypto.Hash import keccak

from .constants import ADDRESS_BYTES, WORD_BITS, WORD_BYTES, WORD_MASK
from .typing import BytesLike

__all__ = [
    "keccak256",
    "keccak_int",
    "to_twos_complement",
    "from_twos_complement",
    "word_to_bytes",
    "word_from_bytes",
    "int_to_word_bytes",
    "as_bytes32",
    "address_bytes",
    "format_address",
]


def keccak256(data: BytesLike) -> bytes:
    """
    Compute the keccak-256 digest of a byte string.

    Args:
        data (bytes | bytearray | memoryview): Hash input.

    Returns:
        bytes: 32-byte digest.
    """
    h = keccak.new(digest_bits=256)
    h.update(bytes(data))
    return h.digest()


def keccak_int(data: BytesLike) -> int:
    """Keccak-256 digest interpreted as a big-endian unsigned integer."""
    return int.from_bytes(keccak256(data), "big")


def to_twos_complement(value: int, bits: int) -> int:
    """
    Encode a signed integer into its ``bits``-wide two's-complement bit pattern.

    Raises:
        ValueError: If value is outside [-2**(bits-1), 2**(bits-1) - 1].
    """
    lo = -(1 << (bits - 1))
    hi = (1 << (bits - 1)) - 1
    if value < lo or value > hi:
        raise ValueError(f"{value} does not fit in int{bits}")
    return value & ((1 << bits) - 1)


def from_twos_complement(raw: int, bits: int) -> int:
    """Interpret a ``bits``-wide bit pattern as a signed two's-complement integer."""
    if raw >> (bits - 1):
        return raw - (1 << bits)
    return raw


def word_to_bytes(word: int) -> bytes:
    """
    Encode an unsigned 256-bit word as 32 big-endian bytes.

    Raises:
        ValueError: If word is outside [0, 2**256).
    """
    if word < 0 or word > WORD_MASK:
        raise ValueError(f"word out of range: {word}")
    return word.to_bytes(WORD_BYTES, "big")


def word_from_bytes(data: BytesLike) -> int:
    """
    Decode 32 big-endian bytes into an unsigned 256-bit word.

    Raises:
        ValueError: If data is not exactly 32 bytes long.
    """
    raw = bytes(data)
    if len(raw) != WORD_BYTES:
        raise ValueError(f"expected {WORD_BYTES} bytes, got {len(raw)}")
    return int.from_bytes(raw, "big")


def int_to_word_bytes(value: int) -> bytes:
    """Encode a signed integer as a 32-byte int256 (abi.encode of int24/int16/int256)."""
    return word_to_bytes(to_twos_complement(value, WORD_BITS))


def as_bytes32(value: BytesLike | str, *, name: str = "value") -> bytes:
    """
    Normalize a 32-byte identifier given as bytes or a 0x-prefixed hex string.

    Args:
        value: 32 raw bytes, or a hex string with exactly 64 hex digits.
        name: Label used in error messages.

    Returns:
        bytes: The 32-byte value.

    Raises:
        ValueError: If the value is not 32 bytes long or not valid hex.
    """
    if isinstance(value, str):
        text = value[2:] if value.startswith(("0x", "0X")) else value
        raw = bytes.fromhex(text)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    else:
        raise TypeError(f"{name} must be bytes or hex str, got {type(value).__name__}")
    if len(raw) != WORD_BYTES:
        raise ValueError(f"{name} must be {WORD_BYTES} bytes, got {len(raw)}")
    return raw


def address_bytes(value: BytesLike | str | int, *, name: str = "address") -> bytes:
    """
    Normalize an account address to 20 raw bytes.

    Args:
        value: 20 raw bytes, a 0x-prefixed hex string with 40 hex digits, or an int
            below 2**160.
        name: Label used in error messages.

    Raises:
        ValueError: If the value does not describe a 20-byte address.
    """
    if isinstance(value, bool):
        raise TypeError(f"{name} must not be bool")
    if isinstance(value, int):
        if value < 0 or value >> (ADDRESS_BYTES * 8):
            raise ValueError(f"{name} out of range: {value}")
        return value.to_bytes(ADDRESS_BYTES, "big")
    if isinstance(value, str):
        text = value[2:] if value.startswith(("0x", "0X")) else value
        raw = bytes.fromhex(text)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    else:
        raise TypeError(f"{name} must be bytes, hex str or int, got {type(value).__name__}")
    if len(raw) != ADDRESS_BYTES:
        raise ValueError(f"{name} must be {ADDRESS_BYTES} bytes, got {len(raw)}")
    return raw


def format_address(value: int) -> str:
    """Render the low 160 bits of a word as a lowercase 0x-prefixed address."""
    return "0x" + (value & ((1 << (ADDRESS_BYTES * 8)) - 1)).to_bytes(ADDRESS_BYTES, "big").hex()
