"""
Batch reads materialized as Polars DataFrames.

Overview
- tick_frame(): one row per requested tick with the full TickInfo record.
- position_frame(): one row per (owner, tick_lower, tick_upper, salt) with PositionInfo.

Schema
- Integer columns that fit in 32 bits (tick, tick_lower, tick_upper) are pl.Int32.
- Liquidity (128-bit) and fee growth accumulators (256-bit) exceed every Polars integer
  dtype; they are stored as base-10 strings (pl.Utf8) so no precision is lost.

Notes
- Each row issues the same reads as the corresponding PoolStateReader accessor; a
  StoreError on any row propagates and no partial frame is returned.
- Rows keep the order in which ticks/positions were requested.
"""

from __future__ import annotations

from collections.abc import Iterable

import polars as pl

from slotview.core.hashing import address_bytes
from slotview.core.typing import BytesLike

from .reader import PoolRef, PoolStateReader

__all__ = [
    "TICK_FRAME_SCHEMA",
    "POSITION_FRAME_SCHEMA",
    "tick_frame",
    "position_frame",
]

TICK_FRAME_SCHEMA: dict[str, pl.DataType] = {
    "tick": pl.Int32,
    "liquidity_gross": pl.Utf8,
    "liquidity_net": pl.Utf8,
    "fee_growth_outside0_x128": pl.Utf8,
    "fee_growth_outside1_x128": pl.Utf8,
}

POSITION_FRAME_SCHEMA: dict[str, pl.DataType] = {
    "owner": pl.Utf8,
    "tick_lower": pl.Int32,
    "tick_upper": pl.Int32,
    "salt": pl.Utf8,
    "liquidity": pl.Utf8,
    "fee_growth_inside0_last_x128": pl.Utf8,
    "fee_growth_inside1_last_x128": pl.Utf8,
}


def tick_frame(reader: PoolStateReader, pool: PoolRef, ticks: Iterable[int]) -> pl.DataFrame:
    """
    Read TickInfo for every tick and collect the results into a DataFrame.

    Args:
        reader (PoolStateReader): Reader bound to the store.
        pool: PoolKey or PoolId.
        ticks (Iterable[int]): Ticks to read (int24).

    Returns:
        pl.DataFrame: Columns per TICK_FRAME_SCHEMA, one row per tick.
    """
    cols: dict[str, list] = {name: [] for name in TICK_FRAME_SCHEMA}
    for tick in ticks:
        info = reader.get_tick_info(pool, tick)
        cols["tick"].append(tick)
        for name, value in info._asdict().items():
            cols[name].append(str(value))
    return pl.DataFrame(cols, schema=TICK_FRAME_SCHEMA)


def position_frame(
    reader: PoolStateReader,
    pool: PoolRef,
    positions: Iterable[tuple[BytesLike | str | int, int, int, BytesLike | str | int]],
) -> pl.DataFrame:
    """
    Read PositionInfo for every (owner, tick_lower, tick_upper, salt) tuple.

    Returns:
        pl.DataFrame: Columns per POSITION_FRAME_SCHEMA; owner is lowercase 0x hex and
        salt is rendered as a 0x-prefixed 64-digit hex string.
    """
    cols: dict[str, list] = {name: [] for name in POSITION_FRAME_SCHEMA}
    for owner, tick_lower, tick_upper, salt in positions:
        info = reader.get_position_info(pool, owner, tick_lower, tick_upper, salt)
        cols["owner"].append("0x" + address_bytes(owner).hex())
        cols["tick_lower"].append(tick_lower)
        cols["tick_upper"].append(tick_upper)
        cols["salt"].append(_salt_hex(salt))
        for name, value in info._asdict().items():
            cols[name].append(str(value))
    return pl.DataFrame(cols, schema=POSITION_FRAME_SCHEMA)


def _salt_hex(salt: BytesLike | str | int) -> str:
    if isinstance(salt, int):
        return f"0x{salt:064x}"
    if isinstance(salt, str):
        text = salt[2:] if salt.startswith(("0x", "0X")) else salt
        return "0x" + text.lower()
    return "0x" + bytes(salt).hex()
