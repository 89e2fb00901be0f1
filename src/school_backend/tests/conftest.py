"""Shared fixtures: in-memory sqlite store, controllable clock and back-off."""

from collections import Counter

import pytest

from school_backend.cache import EntityCache, MemoryCacheStore
from school_backend.database import build_engine, build_session_factory
from school_backend.model import Base
from school_backend.repositories import RecordStore, RepositoryRegistry


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class RecordingSleep:
    """Stands in for asyncio.sleep and remembers every requested delay."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay: float):
        self.delays.append(delay)


class CountingRecordStore(RecordStore):
    """RecordStore counting full-collection loads per table."""

    def __init__(self, session_factory):
        super().__init__(session_factory)
        self.loads = Counter()

    async def get_all_documents(self, model):
        self.loads[model.__tablename__] += 1
        return await super().get_all_documents(model)


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def record_store(session_factory):
    return CountingRecordStore(session_factory)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def cache(clock, sleep):
    return EntityCache(MemoryCacheStore(), clock=clock, sleep=sleep)


@pytest.fixture
def registry(record_store, cache):
    return RepositoryRegistry(record_store, cache)
