"""Ownership ledger: ids of acquired catalog items, persisted on every change."""
import logging
from typing import Any, Callable, FrozenSet, Iterable, List, Optional, Set

from audioshelf.config import LIBRARY_KEY
from audioshelf.models.catalog import CatalogItem

logger = logging.getLogger(__name__)

PersistFn = Callable[[str, List[str]], Any]


class OwnershipLedger:
    """Set of owned item ids. Items are only ever added."""

    def __init__(self, owned_ids: Iterable[str] = (), persist: Optional[PersistFn] = None) -> None:
        self._owned: Set[str] = set(owned_ids)
        self._persist = persist

    @classmethod
    def load(cls, persisted: Optional[Iterable[str]], persist: Optional[PersistFn] = None) -> "OwnershipLedger":
        """Build from the persisted id list. Entries are not checked against the catalog."""
        return cls(persisted or (), persist=persist)

    def acquire(self, item: CatalogItem) -> None:
        """Add item to the library. Persists even when already owned."""
        if item.id not in self._owned:
            self._owned.add(item.id)
            logger.info("Acquired %s (%s)", item.id, item.title)
        self.save()

    def is_owned(self, item_id: str) -> bool:
        return item_id in self._owned

    @property
    def owned_ids(self) -> FrozenSet[str]:
        return frozenset(self._owned)

    def to_persisted(self) -> List[str]:
        return sorted(self._owned)

    def save(self) -> Any:
        if self._persist is None:
            return None
        return self._persist(LIBRARY_KEY, self.to_persisted())

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._owned

    def __len__(self) -> int:
        return len(self._owned)
