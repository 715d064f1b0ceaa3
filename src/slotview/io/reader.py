"""
PoolStateReader: named, typed accessors over a WordStore.

Each accessor is a fixed composition of three steps:
1) derive the slot(s) with slotview.core.slots,
2) read the raw word(s) through the store's persistent or transient primitive,
3) decode the words with slotview.core.codec and the published layouts.

Guarantees
- Store failures (StoreError and subclasses) propagate unchanged. No accessor retries,
  substitutes a default, or inspects a decoded value to decide success.
- An unwritten record decodes to zeros; that is data ("not initialized"), not an error.
- Nothing is cached: every call reads the store again, so a write between two calls
  is always visible.
- Accessors issue one to three bounded reads and hold no mutable state, so a reader
  may be shared across threads.

Notes
- Fee growth accumulators span a full 256-bit word and go through decode_wide; a
  store with narrower native words would supply more words per accumulator.
"""

from __future__ import annotations

from typing import Union

from slotview.core import codec
from slotview.core.constants import (
    ACCUMULATOR_BITS,
    OWNER_SLOT,
    PROTOCOL_FEE_CONTROLLER_SLOT,
    WORD_BITS,
)
from slotview.core.hashing import format_address
from slotview.core.layouts import (
    ADDRESS_LAYOUT,
    LIQUIDITY_LAYOUT,
    POOL_STATE_RECORD,
    POSITION_LIQUIDITY_LAYOUT,
    POSITION_RECORD,
    SLOT0_LAYOUT,
    TICK_INFO_RECORD,
    TICK_LIQUIDITY_LAYOUT,
    TRANSIENT_LAYOUTS,
    UINT256_LAYOUT,
    TransientKind,
)
from slotview.core.schema import (
    FeeGrowthGlobals,
    FeeGrowthOutside,
    PoolKey,
    PositionInfo,
    Slot0,
    TickInfo,
    TickLiquidity,
    currency_delta_key,
)
from slotview.core.slots import (
    claims_balance_slot,
    field_address,
    pool_state_slot,
    position_info_slot,
    protocol_fees_slot,
    tick_bitmap_slot,
    tick_info_slot,
    transient_kind_slot,
)
from slotview.core.typing import BytesLike, PoolId
from slotview.log import logger

from .config import ReaderSettings, check_layout_version
from .store import WordStore

__all__ = ["PoolStateReader", "PoolRef"]

PoolRef = Union[PoolKey, PoolId, bytes, str]


class PoolStateReader:
    """
    Facade composing slot derivation, a WordStore, and the packed-field codec.

    Args:
        store (WordStore): Object exposing read_persistent/read_transient.
        settings (ReaderSettings | None): Reader settings; defaults when None.

    Raises:
        VersionMismatch: If settings or a published table pin a layout other than LAYOUT_V.

    Examples:
        >>> from slotview.io import InMemoryWordStore, PoolStateReader
        >>> reader = PoolStateReader(InMemoryWordStore())
        >>> reader.get_liquidity(b"\\x01" * 32)
        0
    """

    def __init__(self, store: WordStore, settings: ReaderSettings | None = None) -> None:
        self._store = store
        self._settings = settings or ReaderSettings()
        check_layout_version(self._settings)

    @property
    def settings(self) -> ReaderSettings:
        return self._settings

    # ------------------------------ raw reads --------------------------------

    def _read(self, slot: int, what: str) -> int:
        word = self._store.read_persistent(slot)
        if self._settings.log_reads:
            logger.debug("extsload {} slot={:#066x} word={:#x}", what, slot, word)
        return word

    def _read_transient(self, slot: int, what: str) -> int:
        word = self._store.read_transient(slot)
        if self._settings.log_reads:
            logger.debug("exttload {} slot={:#066x} word={:#x}", what, slot, word)
        return word

    def _read_accumulator(self, slot: int, what: str) -> int:
        count = -(-ACCUMULATOR_BITS // WORD_BITS)
        words = [self._read(field_address(slot, i), what) for i in range(count)]
        return codec.decode_wide(words, ACCUMULATOR_BITS)

    @staticmethod
    def _base(pool: PoolRef) -> int:
        return pool_state_slot(pool)

    # ------------------------------ pool record ------------------------------

    def get_slot0(self, pool: PoolRef) -> Slot0:
        """
        Read the packed price/tick/fee word of a pool.

        Returns:
            Slot0: (sqrt_price_x96, tick, protocol_fee, lp_fee).
        """
        slot = field_address(self._base(pool), POOL_STATE_RECORD.offset("slot0"))
        return Slot0(**codec.decode(self._read(slot, "slot0"), SLOT0_LAYOUT))

    get_core_state = get_slot0

    def get_liquidity(self, pool: PoolRef) -> int:
        """Active liquidity of the pool (uint128)."""
        slot = field_address(self._base(pool), POOL_STATE_RECORD.offset("liquidity"))
        return codec.decode(self._read(slot, "liquidity"), LIQUIDITY_LAYOUT)["liquidity"]

    def get_fee_growth_globals(self, pool: PoolRef) -> FeeGrowthGlobals:
        """Global fee growth accumulators (Q128.128, unscaled) for both currencies."""
        base = self._base(pool)
        fg0 = self._read_accumulator(
            field_address(base, POOL_STATE_RECORD.offset("fee_growth_global0_x128")),
            "fee_growth_global0_x128",
        )
        fg1 = self._read_accumulator(
            field_address(base, POOL_STATE_RECORD.offset("fee_growth_global1_x128")),
            "fee_growth_global1_x128",
        )
        return FeeGrowthGlobals(fg0, fg1)

    # ------------------------------ ticks ------------------------------------

    def _tick_liquidity(self, slot: int) -> TickLiquidity:
        word = self._read(field_address(slot, TICK_INFO_RECORD.offset("liquidity")), "tick_liquidity")
        return TickLiquidity(**codec.decode(word, TICK_LIQUIDITY_LAYOUT))

    def _tick_fee_growth_outside(self, slot: int) -> FeeGrowthOutside:
        return FeeGrowthOutside(
            self._read_accumulator(
                field_address(slot, TICK_INFO_RECORD.offset("fee_growth_outside0_x128")),
                "fee_growth_outside0_x128",
            ),
            self._read_accumulator(
                field_address(slot, TICK_INFO_RECORD.offset("fee_growth_outside1_x128")),
                "fee_growth_outside1_x128",
            ),
        )

    def get_tick_info(self, pool: PoolRef, tick: int) -> TickInfo:
        """
        Read the full TickInfo record for ``tick``.

        Returns:
            TickInfo: (liquidity_gross, liquidity_net, fee_growth_outside0_x128,
            fee_growth_outside1_x128).

        Raises:
            AddressError: If tick does not fit in int24.
        """
        slot = tick_info_slot(pool, tick)
        return TickInfo(*self._tick_liquidity(slot), *self._tick_fee_growth_outside(slot))

    def get_tick_liquidity(self, pool: PoolRef, tick: int) -> TickLiquidity:
        """Gross and net liquidity referencing ``tick``."""
        return self._tick_liquidity(tick_info_slot(pool, tick))

    def get_tick_fee_growth_outside(self, pool: PoolRef, tick: int) -> FeeGrowthOutside:
        return self._tick_fee_growth_outside(tick_info_slot(pool, tick))

    def get_tick_bitmap(self, pool: PoolRef, word_position: int) -> int:
        """Initialized-tick bitmap word at ``word_position`` (int16)."""
        slot = tick_bitmap_slot(pool, word_position)
        return codec.decode(self._read(slot, "tick_bitmap"), UINT256_LAYOUT)["value"]

    # ------------------------------ positions --------------------------------

    def _position(self, slot: int) -> PositionInfo:
        liquidity = codec.decode(self._read(slot, "position_liquidity"), POSITION_LIQUIDITY_LAYOUT)
        return PositionInfo(
            liquidity["liquidity"],
            self._read_accumulator(
                field_address(slot, POSITION_RECORD.offset("fee_growth_inside0_last_x128")),
                "fee_growth_inside0_last_x128",
            ),
            self._read_accumulator(
                field_address(slot, POSITION_RECORD.offset("fee_growth_inside1_last_x128")),
                "fee_growth_inside1_last_x128",
            ),
        )

    def get_position_info(
        self,
        pool: PoolRef,
        owner: BytesLike | str | int,
        tick_lower: int,
        tick_upper: int,
        salt: BytesLike | str | int = 0,
    ) -> PositionInfo:
        """
        Read a position identified by owner, tick range, and salt.

        Returns:
            PositionInfo: (liquidity, fee_growth_inside0_last_x128, fee_growth_inside1_last_x128).
        """
        slot = position_info_slot(
            pool, owner=owner, tick_lower=tick_lower, tick_upper=tick_upper, salt=salt
        )
        return self._position(slot)

    def get_position_info_by_key(self, pool: PoolRef, position_key: BytesLike | str) -> PositionInfo:
        """Read a position by its precomputed 32-byte key."""
        return self._position(position_info_slot(pool, position_key))

    def get_position_liquidity(self, pool: PoolRef, position_key: BytesLike | str) -> int:
        slot = position_info_slot(pool, position_key)
        return codec.decode(self._read(slot, "position_liquidity"), POSITION_LIQUIDITY_LAYOUT)[
            "liquidity"
        ]

    # ------------------------------ store-level ------------------------------

    def get_owner(self) -> str:
        word = self._read(OWNER_SLOT, "owner")
        return format_address(codec.decode(word, ADDRESS_LAYOUT)["value"])

    def get_protocol_fee_controller(self) -> str:
        word = self._read(PROTOCOL_FEE_CONTROLLER_SLOT, "protocol_fee_controller")
        return format_address(codec.decode(word, ADDRESS_LAYOUT)["value"])

    def get_protocol_fees_accrued(self, currency: BytesLike | str | int) -> int:
        slot = protocol_fees_slot(currency)
        return codec.decode(self._read(slot, "protocol_fees_accrued"), UINT256_LAYOUT)["value"]

    def get_claims_balance(self, owner: BytesLike | str | int, token_id: int) -> int:
        slot = claims_balance_slot(owner, token_id)
        return codec.decode(self._read(slot, "claims_balance"), UINT256_LAYOUT)["value"]

    # ------------------------------ transient --------------------------------

    def get_transient(self, identifier: BytesLike | str | None, kind: TransientKind) -> int:
        """
        Read a transient-region value.

        Args:
            identifier: 32-byte key for keyed kinds (CURRENCY_DELTA), None otherwise.
            kind (TransientKind): Value to read.

        Returns:
            int: Decoded value (signed for CURRENCY_DELTA).

        Notes:
            Transient words only hold meaning inside the top-level operation that wrote
            them; outside it they read as zero.
        """
        slot = transient_kind_slot(kind, identifier)
        word = self._read_transient(slot, kind.value)
        return codec.decode(word, TRANSIENT_LAYOUTS[kind])["value"]

    def is_unlocked(self) -> bool:
        return self.get_transient(None, TransientKind.IS_UNLOCKED) != 0

    def get_nonzero_delta_count(self) -> int:
        return self.get_transient(None, TransientKind.NONZERO_DELTA_COUNT)

    def get_synced_currency(self) -> str:
        return format_address(self.get_transient(None, TransientKind.SYNCED_CURRENCY))

    def get_synced_reserves(self) -> int:
        return self.get_transient(None, TransientKind.SYNCED_RESERVES)

    def currency_delta(self, target: BytesLike | str | int, currency: BytesLike | str | int) -> int:
        """Outstanding signed delta of ``target`` in ``currency`` for the current operation."""
        return self.get_transient(currency_delta_key(target, currency), TransientKind.CURRENCY_DELTA)
