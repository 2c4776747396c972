"""Library session: owns the ledger, positions, selection and player for one process."""
import logging
import threading
from typing import Callable, List, Optional, Sequence, Tuple

from audioshelf.config import LIBRARY_KEY, PLAYBACKS_KEY, TICK_INTERVAL_SEC
from audioshelf.core.catalog import SAMPLE_CATALOG, get_item_by_id, items_with_ids
from audioshelf.core.kv_store import KeyValueStore
from audioshelf.core.ownership_ledger import OwnershipLedger
from audioshelf.core.persist_writer import PersistWriter
from audioshelf.core.playback_session import PlaybackController, TickScheduler
from audioshelf.core.position_store import PlaybackPositionStore
from audioshelf.models.catalog import CatalogItem
from audioshelf.models.playback import PlayerSnapshot

logger = logging.getLogger(__name__)

# Topics passed to subscribers
LIBRARY = "library"
POSITIONS = "positions"
SELECTION = "selection"
PLAYER = "player"


def default_selection(catalog: Sequence[CatalogItem], ledger: OwnershipLedger) -> Optional[str]:
    """First owned item in catalog order, or None.

    An owned id with no catalog entry is not papered over by picking some
    other item; the selection stays empty and the mismatch is logged.
    """
    if len(ledger) == 0:
        return None
    for item in catalog:
        if ledger.is_owned(item.id):
            return item.id
    logger.warning(
        "Library has %d id(s) but none match the catalog: %s",
        len(ledger),
        ", ".join(sorted(ledger.owned_ids)),
    )
    return None


class LibrarySession:
    """Single writer for library and playback state.

    All mutations take one re-entrant lock, update the in-memory structures,
    then queue a persist on the writer. Reads never touch storage.
    """

    def __init__(
        self,
        catalog: Sequence[CatalogItem],
        ledger: OwnershipLedger,
        positions: PlaybackPositionStore,
        *,
        writer: Optional[PersistWriter] = None,
        scheduler: Optional[TickScheduler] = None,
        tick_interval_sec: float = TICK_INTERVAL_SEC,
    ) -> None:
        self.catalog: List[CatalogItem] = list(catalog)
        self.ledger = ledger
        self.positions = positions
        self.writer = writer
        self._scheduler = scheduler
        self._tick_interval = tick_interval_sec
        self._lock = threading.RLock()
        self._subscribers: List[Callable[[str], None]] = []
        self._player: Optional[PlaybackController] = None
        self.selected_id: Optional[str] = None

    @classmethod
    def open(
        cls,
        store: KeyValueStore,
        *,
        catalog: Sequence[CatalogItem] = SAMPLE_CATALOG,
        writer: Optional[PersistWriter] = None,
        scheduler: Optional[TickScheduler] = None,
        tick_interval_sec: float = TICK_INTERVAL_SEC,
    ) -> "LibrarySession":
        """Load persisted state from store and derive the default selection."""
        writer = writer or PersistWriter(store)
        ledger = OwnershipLedger.load(store.get_string_list(LIBRARY_KEY), persist=writer.submit)
        positions = PlaybackPositionStore.load(store.get_string_list(PLAYBACKS_KEY), persist=writer.submit)
        clamped = positions.clamp_loaded(catalog)
        if clamped:
            logger.warning("Clamped out-of-range stored positions: %s", ", ".join(sorted(clamped)))
        session = cls(
            catalog,
            ledger,
            positions,
            writer=writer,
            scheduler=scheduler,
            tick_interval_sec=tick_interval_sec,
        )
        logger.info("Loaded library (%d owned, %d positions)", len(ledger), len(positions.positions))
        selected = default_selection(session.catalog, ledger)
        if selected is not None:
            session._open_player(session.get_item(selected))
        return session

    # Subscription

    def subscribe(self, callback: Callable[[str], None]) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def _notify(self, topic: str) -> None:
        for cb in list(self._subscribers):
            try:
                cb(topic)
            except Exception as e:
                logger.warning("Subscriber failed on %s: %s", topic, e)

    # Catalog and library

    def get_item(self, item_id: str) -> Optional[CatalogItem]:
        return get_item_by_id(self.catalog, item_id)

    def is_owned(self, item_id: str) -> bool:
        with self._lock:
            return self.ledger.is_owned(item_id)

    def store_items(self) -> List[Tuple[CatalogItem, bool]]:
        """Catalog in order, paired with ownership."""
        with self._lock:
            return [(item, self.ledger.is_owned(item.id)) for item in self.catalog]

    def library_items(self) -> List[CatalogItem]:
        """Owned items that exist in the catalog, in catalog order."""
        with self._lock:
            return items_with_ids(self.catalog, self.ledger.owned_ids)

    def purchase(self, item_id: str) -> Optional[CatalogItem]:
        """Acquire item_id. Returns the item, or None when it is not in the catalog."""
        item = self.get_item(item_id)
        if item is None:
            return None
        with self._lock:
            self.ledger.acquire(item)
        self._notify(LIBRARY)
        return item

    def get_position(self, item_id: str) -> float:
        with self._lock:
            return self.positions.get_position(item_id)

    # Player

    @property
    def selected_item(self) -> Optional[CatalogItem]:
        if self.selected_id is None:
            return None
        return self.get_item(self.selected_id)

    @property
    def player(self) -> Optional[PlaybackController]:
        return self._player

    def select(self, item_id: str) -> Optional[PlaybackController]:
        """Open item_id in the player, stopping the previous one. None if unknown."""
        item = self.get_item(item_id)
        if item is None:
            return None
        with self._lock:
            player = self._open_player(item)
        self._notify(SELECTION)
        return player

    def _open_player(self, item: CatalogItem) -> PlaybackController:
        with self._lock:
            if self._player is not None:
                self._player.close()
            self.selected_id = item.id
            self._player = PlaybackController(
                item,
                self.positions,
                scheduler=self._scheduler,
                interval_sec=self._tick_interval,
                lock=self._lock,
                on_change=self._player_changed,
            )
            return self._player

    def _player_changed(self) -> None:
        self._notify(PLAYER)

    def toggle(self) -> Optional[PlayerSnapshot]:
        player = self._player
        if player is None:
            return None
        player.toggle()
        return player.snapshot()

    def seek(self, raw_seconds: float) -> Optional[float]:
        player = self._player
        if player is None:
            return None
        value = player.seek(raw_seconds)
        self._notify(POSITIONS)
        return value

    def skip(self, delta_seconds: float) -> Optional[float]:
        player = self._player
        if player is None:
            return None
        value = player.skip(delta_seconds)
        self._notify(POSITIONS)
        return value

    def snapshot(self) -> Optional[PlayerSnapshot]:
        player = self._player
        return player.snapshot() if player is not None else None

    # Persistence

    def flush(self, timeout: Optional[float] = None) -> bool:
        if self.writer is None:
            return True
        return self.writer.flush(timeout=timeout)

    def persistence_status(self) -> dict:
        if self.writer is None:
            return {"ok": True, "last_error": None, "pending": 0}
        return {
            "ok": self.writer.last_error is None,
            "last_error": self.writer.last_error,
            "pending": self.writer.pending,
        }

    def close(self) -> None:
        """Stop playback and drain pending writes."""
        with self._lock:
            if self._player is not None:
                self._player.close()
        if self.writer is not None:
            self.writer.close()
