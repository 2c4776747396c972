"""Background write queue for the key-value store.

Submissions for the same key are coalesced (latest value wins) and written
by a single worker thread, so writes for a key land in the order issued.
Each submit returns a Future that resolves once the value covering it has
been written, or fails with PersistenceError after retries are exhausted.
"""
import logging
import threading
import time
from concurrent.futures import Future
from typing import Dict, List, Optional, Tuple

from audioshelf.config import PERSIST_DEBOUNCE_SEC, PERSIST_RETRIES, PERSIST_RETRY_DELAY_SEC
from audioshelf.core.kv_store import KeyValueStore, PersistenceError

logger = logging.getLogger(__name__)


class PersistWriter:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        debounce_sec: float = PERSIST_DEBOUNCE_SEC,
        retries: int = PERSIST_RETRIES,
        retry_delay_sec: float = PERSIST_RETRY_DELAY_SEC,
    ) -> None:
        self.store = store
        self.debounce_sec = debounce_sec
        self.retries = max(1, retries)
        self.retry_delay_sec = retry_delay_sec
        self._cond = threading.Condition()
        self._pending: Dict[str, Tuple[List[str], List[Future]]] = {}
        self._in_flight = 0
        self._closed = False
        self._thread: Optional[threading.Thread] = None
        self.last_error: Optional[str] = None
        self.writes = 0

    def start(self) -> None:
        """Start the worker thread. Idempotent."""
        with self._cond:
            if self._thread is not None:
                return
            self._closed = False
            self._thread = threading.Thread(target=self._run, name="persist-writer", daemon=True)
            self._thread.start()

    def submit(self, key: str, values: List[str]) -> Future:
        """Queue a write of values under key; returns a completion future."""
        future: Future = Future()
        with self._cond:
            if self._closed:
                future.set_exception(PersistenceError("writer is closed"))
                return future
            _, futures = self._pending.get(key, (None, []))
            futures.append(future)
            self._pending[key] = (list(values), futures)
            self._cond.notify_all()
        if self._thread is None:
            self.start()
        return future

    @property
    def pending(self) -> int:
        with self._cond:
            return len(self._pending) + self._in_flight

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Block until every queued write has been attempted. Returns False on timeout."""
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._cond:
            while self._pending or self._in_flight:
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    return False
                self._cond.wait(timeout=remaining)
        return True

    def close(self, timeout: float = 5.0) -> None:
        """Drain queued writes and stop the worker."""
        self.flush(timeout=timeout)
        with self._cond:
            self._closed = True
            self._cond.notify_all()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None

    def _run(self) -> None:
        while True:
            with self._cond:
                while not self._pending and not self._closed:
                    self._cond.wait()
                if self._closed and not self._pending:
                    return
            if self.debounce_sec > 0:
                time.sleep(self.debounce_sec)
            with self._cond:
                batch = self._pending
                self._pending = {}
                self._in_flight = len(batch)
            for key, (values, futures) in batch.items():
                self._write(key, values, futures)
                with self._cond:
                    self._in_flight -= 1
                    self._cond.notify_all()

    def _write(self, key: str, values: List[str], futures: List[Future]) -> None:
        error: Optional[Exception] = None
        for attempt in range(1, self.retries + 1):
            try:
                self.store.set_string_list(key, values)
            except Exception as e:
                error = e
                logger.warning("Persist %r failed (attempt %d/%d): %s", key, attempt, self.retries, e)
                if attempt < self.retries:
                    time.sleep(self.retry_delay_sec)
                continue
            self.writes += 1
            self.last_error = None
            for f in futures:
                f.set_result(None)
            return
        self.last_error = f"{key}: {error}"
        logger.error("Giving up persisting %r after %d attempts: %s", key, self.retries, error)
        exc = error if isinstance(error, PersistenceError) else PersistenceError(str(error))
        for f in futures:
            f.set_exception(exc)
