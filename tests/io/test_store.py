import pytest

from slotview.core.constants import MAX_SLOT
from slotview.io import (
    AddressRangeError,
    InMemoryWordStore,
    StoreError,
    StoreUnavailableError,
    WordStore,
)


def test_unwritten_addresses_read_zero(store: InMemoryWordStore) -> None:
    assert store.read_persistent(0) == 0
    assert store.read_persistent(MAX_SLOT) == 0
    assert store.read_transient(12345) == 0
    assert len(store) == 0


def test_regions_are_independent(store: InMemoryWordStore) -> None:
    store.write_persistent(7, 1)
    store.write_transient(7, 2)
    assert store.read_persistent(7) == 1
    assert store.read_transient(7) == 2


def test_clear_transient_only_drops_transient_words(store: InMemoryWordStore) -> None:
    store.write_persistent(1, 11)
    store.write_transient(1, 22)
    store.clear_transient()
    assert store.read_transient(1) == 0
    assert store.read_persistent(1) == 11


def test_write_record_writes_consecutive_words(store: InMemoryWordStore) -> None:
    store.write_record(100, [1, 2, 3])
    assert [store.read_persistent(100 + i) for i in range(3)] == [1, 2, 3]
    assert len(store) == 3


def test_out_of_range_reads_raise_address_range_error() -> None:
    s = InMemoryWordStore(max_address=1000)
    with pytest.raises(AddressRangeError) as ei:
        s.read_persistent(1001)
    assert ei.value.address == 1001
    assert isinstance(ei.value, StoreError)
    with pytest.raises(AddressRangeError):
        s.read_transient(-1)


def test_unreachable_store_raises_on_every_read() -> None:
    s = InMemoryWordStore(unreachable=True)
    with pytest.raises(StoreUnavailableError):
        s.read_persistent(0)
    with pytest.raises(StoreUnavailableError):
        s.read_transient(0)


def test_words_must_fit_in_256_bits(store: InMemoryWordStore) -> None:
    with pytest.raises(ValueError):
        store.write_persistent(0, 1 << 256)
    with pytest.raises(ValueError):
        store.write_persistent(0, -1)


def test_in_memory_store_satisfies_protocol(store: InMemoryWordStore) -> None:
    assert isinstance(store, WordStore)
