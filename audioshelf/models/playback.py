"""Simulated player state."""
from dataclasses import dataclass
from enum import Enum


class PlayerState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"


@dataclass
class PlayerSnapshot:
    """Point-in-time view of the player for one catalog item."""
    item_id: str
    state: PlayerState
    position_seconds: float
    duration_seconds: float

    @property
    def is_playing(self) -> bool:
        return self.state is PlayerState.PLAYING
