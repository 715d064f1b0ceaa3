"""
Custom exceptions for the slotview.io module.

Purpose
- Provide store-boundary error types raised by WordStore implementations and the
  configuration loader.
- Keep slotview.core as the source of truth for layout/codec/address errors (see
  slotview.core.errors).

Boundaries
- StoreError and its subclasses are raised by WordStore.read_persistent and
  WordStore.read_transient. The reader propagates them unchanged; nothing in
  slotview converts a StoreError into a value.
- ConfigError is raised by ReaderSettings loaders for values that cannot be parsed.

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations


class StoreError(Exception):
    """
    Base class for failed reads from a word store.

    Notes:
        A successful read of an unwritten address returns 0 and is not an error.
    """


class StoreUnavailableError(StoreError):
    """Raised when the store cannot be reached at all."""


class AddressRangeError(StoreError):
    """
    Raised when a read targets an address outside the range the store serves.

    Attributes:
        address (int): The rejected address.
    """

    def __init__(self, address: int, message: str | None = None) -> None:
        self.address = address
        super().__init__(message or f"address {address:#x} is outside the store range")


class ConfigError(ValueError):
    """
    Raised when reader configuration is invalid or cannot be parsed.

    Examples:
        - Non-integer layout version component
        - Unknown log level
    """
