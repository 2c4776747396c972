"""Core services: ownership ledger, playback positions, simulated player, session."""
from audioshelf.core.ownership_ledger import OwnershipLedger
from audioshelf.core.position_store import PlaybackPositionStore
from audioshelf.core.session import LibrarySession

__all__ = ["LibrarySession", "OwnershipLedger", "PlaybackPositionStore"]
