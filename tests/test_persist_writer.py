import threading

import pytest

from audioshelf.core.kv_store import MemoryKeyValueStore, PersistenceError
from audioshelf.core.persist_writer import PersistWriter


class RecordingStore(MemoryKeyValueStore):
    def __init__(self) -> None:
        super().__init__()
        self.writes = []

    def set_string_list(self, key, values):
        self.writes.append((key, list(values)))
        super().set_string_list(key, values)


class FlakyStore(MemoryKeyValueStore):
    def __init__(self, failures: int) -> None:
        super().__init__()
        self.failures = failures
        self.attempts = 0

    def set_string_list(self, key, values):
        self.attempts += 1
        if self.attempts <= self.failures:
            raise PersistenceError("disk unavailable")
        super().set_string_list(key, values)


def test_burst_is_coalesced():
    store = RecordingStore()
    writer = PersistWriter(store, debounce_sec=0.2)
    futures = [writer.submit("playbacks", [f"a1|{i}.00"]) for i in range(5)]
    assert writer.flush(timeout=5)
    assert store.writes == [("playbacks", ["a1|4.00"])]
    for f in futures:
        assert f.result(timeout=1) is None
    writer.close()


def test_keys_are_written_independently():
    store = RecordingStore()
    writer = PersistWriter(store, debounce_sec=0.0)
    writer.submit("library", ["a1"]).result(timeout=5)
    writer.submit("playbacks", ["a1|1.00"]).result(timeout=5)
    assert store.get_string_list("library") == ["a1"]
    assert store.get_string_list("playbacks") == ["a1|1.00"]
    writer.close()


def test_retry_recovers():
    store = FlakyStore(failures=1)
    writer = PersistWriter(store, debounce_sec=0.0, retries=3, retry_delay_sec=0.0)
    assert writer.submit("library", ["a1"]).result(timeout=5) is None
    assert store.attempts == 2
    assert writer.last_error is None
    writer.close()


def test_gives_up_and_reports():
    store = FlakyStore(failures=100)
    writer = PersistWriter(store, debounce_sec=0.0, retries=2, retry_delay_sec=0.0)
    future = writer.submit("library", ["a1"])
    with pytest.raises(PersistenceError):
        future.result(timeout=5)
    assert store.attempts == 2
    assert "library" in writer.last_error
    writer.close()


def test_submit_after_close_fails():
    writer = PersistWriter(MemoryKeyValueStore(), debounce_sec=0.0)
    writer.start()
    writer.close()
    with pytest.raises(PersistenceError):
        writer.submit("library", []).result(timeout=1)


def test_flush_times_out_on_stuck_store():
    release = threading.Event()

    class StuckStore(MemoryKeyValueStore):
        def set_string_list(self, key, values):
            release.wait(timeout=5)

    writer = PersistWriter(StuckStore(), debounce_sec=0.0)
    writer.submit("library", ["a1"])
    assert writer.flush(timeout=0.05) is False
    assert writer.pending == 1
    release.set()
    assert writer.flush(timeout=5)
    writer.close()
