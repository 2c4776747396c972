"""Player: select a title, play/pause, seek and skip."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from audioshelf.api.state import AppState, get_state
from audioshelf.config import SKIP_SECONDS
from audioshelf.core.formatting import format_player_duration
from audioshelf.core.session import LibrarySession

router = APIRouter()

NO_SELECTION_MESSAGE = "Select an audiobook from your library to start listening!"


def _empty_player():
    return {
        "selected_id": None,
        "title": None,
        "author": None,
        "state": "stopped",
        "is_playing": False,
        "position_seconds": 0.0,
        "duration_seconds": 0.0,
        "position_label": format_player_duration(0),
        "duration_label": format_player_duration(0),
        "message": NO_SELECTION_MESSAGE,
    }


def _player_to_dict(session: LibrarySession) -> dict:
    item = session.selected_item
    snap = session.snapshot()
    if item is None or snap is None:
        return _empty_player()
    return {
        "selected_id": item.id,
        "title": item.title,
        "author": item.author,
        "state": snap.state.value,
        "is_playing": snap.is_playing,
        "position_seconds": snap.position_seconds,
        "duration_seconds": snap.duration_seconds,
        "position_label": format_player_duration(snap.position_seconds),
        "duration_label": format_player_duration(snap.duration_seconds),
        "message": None,
    }


class SeekBody(BaseModel):
    position: float


class SkipBody(BaseModel):
    delta: float


@router.get("")
def get_player(state: AppState = Depends(get_state)):
    """Return the selected title and player state."""
    return _player_to_dict(state.session)


@router.post("/select/{item_id}")
def select(item_id: str, state: AppState = Depends(get_state)):
    """Open an owned title in the player (starts stopped at its saved position)."""
    session = state.session
    if session.get_item(item_id) is None:
        raise HTTPException(status_code=404, detail="Audiobook not found")
    if not session.is_owned(item_id):
        raise HTTPException(status_code=403, detail="Audiobook is not in your library")
    session.select(item_id)
    return _player_to_dict(session)


@router.post("/toggle")
def toggle(state: AppState = Depends(get_state)):
    """Play or pause the selected title."""
    state.session.toggle()
    return _player_to_dict(state.session)


@router.post("/seek")
def seek(body: SeekBody, state: AppState = Depends(get_state)):
    """Jump to an absolute position; out-of-range values are clamped."""
    state.session.seek(body.position)
    return _player_to_dict(state.session)


@router.post("/skip")
def skip(body: SkipBody, state: AppState = Depends(get_state)):
    """Move relative to the current position."""
    state.session.skip(body.delta)
    return _player_to_dict(state.session)


@router.post("/skip/forward")
def skip_forward(seconds: Optional[float] = None, state: AppState = Depends(get_state)):
    state.session.skip(seconds if seconds is not None else SKIP_SECONDS)
    return _player_to_dict(state.session)


@router.post("/skip/back")
def skip_back(seconds: Optional[float] = None, state: AppState = Depends(get_state)):
    state.session.skip(-(seconds if seconds is not None else SKIP_SECONDS))
    return _player_to_dict(state.session)
