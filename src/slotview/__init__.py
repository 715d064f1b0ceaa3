"""
slotview — typed, named reads of pool state held in a singleton word store.

The package is split in two layers:
- slotview.core: pure address derivation, packed-field codec, and published layouts.
- slotview.io: the WordStore boundary, an in-memory store, configuration, the
  PoolStateReader facade, and polars frames over batched reads.

Logging goes through loguru and is disabled for this package until
slotview.log.configure_logging is called.
"""

from __future__ import annotations

from loguru import logger

logger.disable("slotview")

__version__ = "0.1.0"
