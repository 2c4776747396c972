"""Per-item playback positions, clamped to item duration and persisted on every change."""
import logging
import math
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from audioshelf.config import PLAYBACKS_KEY
from audioshelf.core.catalog import get_item_by_id
from audioshelf.core.position_codec import decode_positions, encode_positions
from audioshelf.models.catalog import CatalogItem

logger = logging.getLogger(__name__)

PersistFn = Callable[[str, List[str]], Any]


def clamp_position(raw_seconds: float, duration: float) -> float:
    return max(0.0, min(float(duration), float(raw_seconds)))


class PlaybackPositionStore:
    def __init__(self, positions: Optional[Mapping[str, float]] = None, persist: Optional[PersistFn] = None) -> None:
        self._positions: Dict[str, float] = dict(positions or {})
        self._persist = persist

    @classmethod
    def load(cls, persisted: Optional[Iterable[str]], persist: Optional[PersistFn] = None) -> "PlaybackPositionStore":
        return cls(decode_positions(persisted or ()), persist=persist)

    def clamp_loaded(self, catalog: Iterable[CatalogItem]) -> List[str]:
        """Clamp stored values of catalog items into [0, duration] without persisting.

        Ids with no catalog entry are left as they are. Returns the ids changed.
        """
        catalog = list(catalog)
        changed = []
        for item_id, value in list(self._positions.items()):
            item = get_item_by_id(catalog, item_id)
            if item is None:
                continue
            clamped = clamp_position(value, item.total_duration_seconds)
            if clamped != value:
                self._positions[item_id] = clamped
                changed.append(item_id)
        return changed

    def set_position(self, item_id: str, item: CatalogItem, raw_seconds: float) -> float:
        """Store raw_seconds clamped to [0, duration]; returns the stored value.

        NaN keeps the current position.
        """
        if math.isnan(raw_seconds):
            raw_seconds = self.get_position(item_id)
        value = clamp_position(raw_seconds, item.total_duration_seconds)
        self._positions[item_id] = value
        logger.debug("Position %s = %.2f (requested %.2f)", item_id, value, raw_seconds)
        self.save()
        return value

    def get_position(self, item_id: str) -> float:
        return self._positions.get(item_id, 0.0)

    def skip(self, item_id: str, item: CatalogItem, current_position: float, delta_seconds: float) -> float:
        """Move relative to current_position; negative delta rewinds."""
        return self.set_position(item_id, item, current_position + delta_seconds)

    @property
    def positions(self) -> Dict[str, float]:
        return dict(self._positions)

    def to_persisted(self) -> List[str]:
        return encode_positions(self._positions)

    def save(self) -> Any:
        if self._persist is None:
            return None
        return self._persist(PLAYBACKS_KEY, self.to_persisted())
