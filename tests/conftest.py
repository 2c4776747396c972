from typing import Callable, List

import pytest

from audioshelf.core.kv_store import MemoryKeyValueStore
from audioshelf.core.persist_writer import PersistWriter
from audioshelf.core.session import LibrarySession
from audioshelf.models.catalog import CatalogItem


class ManualTick:
    def __init__(self, callback: Callable[[], None]) -> None:
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualTickScheduler:
    """Scheduler whose ticks fire only when the test says so."""

    def __init__(self) -> None:
        self.ticks: List[ManualTick] = []

    def schedule(self, interval_sec: float, callback: Callable[[], None]) -> ManualTick:
        tick = ManualTick(callback)
        self.ticks.append(tick)
        return tick

    @property
    def active(self) -> List[ManualTick]:
        return [t for t in self.ticks if not t.cancelled]

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            for tick in self.active:
                tick.callback()


class RecordingPersist:
    def __init__(self) -> None:
        self.calls = []

    def __call__(self, key, values):
        self.calls.append((key, list(values)))


@pytest.fixture
def scheduler():
    return ManualTickScheduler()


@pytest.fixture
def persist():
    return RecordingPersist()


@pytest.fixture
def short_item():
    return CatalogItem(
        id="s1",
        title="Two Second Story",
        author="Tester",
        cover_reference="asset:covers/s1.png",
        total_duration_seconds=2.0,
    )


@pytest.fixture
def memory_store():
    return MemoryKeyValueStore()


@pytest.fixture
def writer(memory_store):
    w = PersistWriter(memory_store, debounce_sec=0.0, retries=1, retry_delay_sec=0.0)
    yield w
    w.close()


@pytest.fixture
def session(memory_store, writer, scheduler):
    s = LibrarySession.open(memory_store, writer=writer, scheduler=scheduler)
    yield s
    s.close()
