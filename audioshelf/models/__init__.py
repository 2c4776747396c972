"""Data models for the catalog and simulated playback."""
from audioshelf.models.catalog import CatalogItem
from audioshelf.models.playback import PlayerSnapshot, PlayerState

__all__ = [
    "CatalogItem",
    "PlayerSnapshot",
    "PlayerState",
]
