from __future__ import annotations

import pytest
from loguru import logger

from slotview.core.schema import PoolKey, pool_id
from slotview.io import InMemoryWordStore, PoolStateReader


@pytest.fixture(autouse=True)
def silence_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield
    logger.disable("slotview")


@pytest.fixture
def pool_key() -> PoolKey:
    return PoolKey(
        currency0="0x" + "00" * 20,
        currency1="0x" + "aa" * 20,
        fee=3000,
        tick_spacing=60,
    )


@pytest.fixture
def pid(pool_key: PoolKey) -> bytes:
    return pool_id(pool_key)


@pytest.fixture
def store() -> InMemoryWordStore:
    return InMemoryWordStore()


@pytest.fixture
def reader(store: InMemoryWordStore) -> PoolStateReader:
    return PoolStateReader(store)
