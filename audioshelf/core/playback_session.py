"""Simulated playback: a Stopped/Playing state machine driven by a repeating tick.

Each tick advances the position by one second through the position store's
clamp-and-persist path. Reaching the end of the item stops playback. Pausing
cancels the scheduled tick; a tick that was already in flight when the
player paused is dropped.
"""
import functools
import logging
import threading
from typing import Callable, Optional, Protocol

from audioshelf.config import TICK_ADVANCE_SEC, TICK_INTERVAL_SEC
from audioshelf.core.position_store import PlaybackPositionStore
from audioshelf.models.catalog import CatalogItem
from audioshelf.models.playback import PlayerSnapshot, PlayerState

logger = logging.getLogger(__name__)


class TickHandle(Protocol):
    def cancel(self) -> None:
        ...


class TickScheduler(Protocol):
    def schedule(self, interval_sec: float, callback: Callable[[], None]) -> TickHandle:
        ...


class _ThreadTick:
    """Daemon thread calling callback every interval until cancelled."""

    def __init__(self, interval_sec: float, callback: Callable[[], None]) -> None:
        self._interval = interval_sec
        self._callback = callback
        self._stop = threading.Event()
        self._thread = threading.Thread(target=self._loop, name="playback-tick", daemon=True)
        self._thread.start()

    def _loop(self) -> None:
        while not self._stop.wait(timeout=self._interval):
            try:
                self._callback()
            except Exception as e:
                logger.warning("Playback tick: %s", e)

    @property
    def alive(self) -> bool:
        return self._thread.is_alive()

    def cancel(self) -> None:
        # Only signals; the caller may hold the lock an in-flight tick is waiting on
        self._stop.set()

    def join(self, timeout: Optional[float] = None) -> None:
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout=timeout)


class ThreadTickScheduler:
    def schedule(self, interval_sec: float, callback: Callable[[], None]) -> _ThreadTick:
        return _ThreadTick(interval_sec, callback)


class PlaybackController:
    """Player for one catalog item. Starts Stopped at the stored position."""

    def __init__(
        self,
        item: CatalogItem,
        store: PlaybackPositionStore,
        *,
        scheduler: Optional[TickScheduler] = None,
        interval_sec: float = TICK_INTERVAL_SEC,
        lock=None,
        on_change: Optional[Callable[[], None]] = None,
    ) -> None:
        self.item = item
        self._store = store
        self._scheduler = scheduler or ThreadTickScheduler()
        self._interval = interval_sec
        self._lock = lock or threading.RLock()
        self._on_change = on_change
        self._ticker: Optional[TickHandle] = None
        self._generation = 0
        self.state = PlayerState.STOPPED
        self.position = store.get_position(item.id)

    @property
    def duration(self) -> float:
        return self.item.total_duration_seconds

    @property
    def at_end(self) -> bool:
        return self.position >= self.duration

    def toggle(self) -> PlayerState:
        with self._lock:
            if self.state is PlayerState.PLAYING:
                self.pause()
            else:
                self.play()
            return self.state

    def play(self) -> None:
        with self._lock:
            if self.state is PlayerState.PLAYING:
                return
            if self.at_end:
                logger.debug("Play ignored: %s already at end", self.item.id)
                return
            self._generation += 1
            self.state = PlayerState.PLAYING
            self._ticker = self._scheduler.schedule(
                self._interval, functools.partial(self._on_tick, self._generation)
            )
            logger.info("Playing %s from %.2f", self.item.id, self.position)
        self._changed()

    def pause(self) -> None:
        with self._lock:
            if self.state is PlayerState.STOPPED:
                return
            self._stop_locked()
            logger.info("Paused %s at %.2f", self.item.id, self.position)
        self._changed()

    def close(self) -> None:
        """Stop without notifying; used when the player view is left."""
        with self._lock:
            if self.state is PlayerState.PLAYING:
                self._stop_locked()

    def tick(self) -> None:
        """Advance one step. No-op unless playing."""
        self._on_tick(self._generation)

    def _on_tick(self, generation: int) -> None:
        with self._lock:
            if self.state is not PlayerState.PLAYING or generation != self._generation:
                return
            self.position = self._store.set_position(
                self.item.id, self.item, self.position + TICK_ADVANCE_SEC
            )
            if self.at_end:
                self._stop_locked()
                logger.info("Reached end of %s", self.item.id)
        self._changed()

    def seek(self, raw_seconds: float) -> float:
        with self._lock:
            self.position = self._store.set_position(self.item.id, self.item, raw_seconds)
            value = self.position
        self._changed()
        return value

    def skip(self, delta_seconds: float) -> float:
        with self._lock:
            self.position = self._store.skip(self.item.id, self.item, self.position, delta_seconds)
            value = self.position
        self._changed()
        return value

    def snapshot(self) -> PlayerSnapshot:
        with self._lock:
            return PlayerSnapshot(
                item_id=self.item.id,
                state=self.state,
                position_seconds=self.position,
                duration_seconds=self.duration,
            )

    def _stop_locked(self) -> None:
        self.state = PlayerState.STOPPED
        self._generation += 1
        ticker, self._ticker = self._ticker, None
        if ticker is not None:
            ticker.cancel()

    def _changed(self) -> None:
        if self._on_change is not None:
            self._on_change()
