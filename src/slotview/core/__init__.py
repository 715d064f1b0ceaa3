"""
Core package aggregator for slotview contracts (hashing, slot derivation, packed codec, layouts, versioning).

## Contracts (single source of truth)
- Hashing: keccak-256 and 32-byte word encodings.
- Slots: base, field, and keyed-collection entry addresses.
- Codec: FieldSpec/PackedLayout, decode, decode_wide, encode.
- Layouts: published word and record layout tables, pinned to LAYOUT_V.
- Schema: PoolKey, key builders, typed result records.
- Versioning/Constants/Errors: LAYOUT_V, root slots and offsets, typed exceptions.

## Notes
- Zero-IO policy: stdlib + pydantic + pycryptodome only; no store access.
- Layout tables are validated at import; a defect raises LayoutError immediately.
- Nothing here caches; every function is pure.

## Downstream usage
- slotview.io.reader composes slots + codec + a WordStore into named accessors.
- slotview.io.store uses the codec to write records in tests and simulations.

## Examples
```python
from slotview.core.schema import PoolKey, pool_id
from slotview.core.slots import pool_state_slot, tick_info_slot

key = PoolKey(currency0="0x" + "00" * 20, currency1="0x" + "aa" * 20, fee=3000, tick_spacing=60)
base = pool_state_slot(key)
tick_slot = tick_info_slot(pool_id(key), -120)
```
"""
