"""
slotview.io — the store boundary and the typed reader facade.

## Responsibilities
- Define the WordStore capability (read_persistent/read_transient) and provide an
  in-memory arena implementation for tests and simulations.
- Compose slotview.core derivation and codec into PoolStateReader accessors.
- Load ReaderSettings (env > TOML > defaults) and check the pinned layout version.
- Materialize batched reads as Polars DataFrames (slotview.io.frames).

## Public API
- WordStore, InMemoryWordStore: store protocol and in-memory arena.
- PoolStateReader: named, typed accessors.
- ReaderSettings: reader configuration.
- StoreError and subclasses: read failures, always propagated unchanged.

## Import DAG discipline
- Depends on stdlib, polars, loguru, and slotview.core.*.
- slotview.core MUST NOT import slotview.io.

## Examples
```python
from slotview.core.schema import PoolKey
from slotview.io import InMemoryWordStore, PoolStateReader

store = InMemoryWordStore()
reader = PoolStateReader(store)
key = PoolKey(currency0="0x" + "00" * 20, currency1="0x" + "aa" * 20, fee=3000, tick_spacing=60)
reader.get_slot0(key)  # Slot0(sqrt_price_x96=0, tick=0, protocol_fee=0, lp_fee=0)
```
"""

from __future__ import annotations

from .config import ReaderSettings
from .errors import AddressRangeError, ConfigError, StoreError, StoreUnavailableError
from .reader import PoolStateReader
from .store import InMemoryWordStore, WordStore

__all__ = [
    "ReaderSettings",
    "PoolStateReader",
    "WordStore",
    "InMemoryWordStore",
    "StoreError",
    "StoreUnavailableError",
    "AddressRangeError",
    "ConfigError",
]
