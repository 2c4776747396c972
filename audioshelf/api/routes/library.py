"""Library: purchased titles with listening progress."""
from fastapi import APIRouter, Depends

from audioshelf.api.state import AppState, get_state
from audioshelf.core.formatting import format_progress

router = APIRouter()

EMPTY_LIBRARY_MESSAGE = "No audiobooks purchased yet. Browse the store to get started!"


@router.get("")
def list_library(state: AppState = Depends(get_state)):
    """Owned titles in catalog order with position and progress label."""
    session = state.session
    items = []
    for item in session.library_items():
        pos = session.get_position(item.id)
        items.append(
            {
                "id": item.id,
                "title": item.title,
                "author": item.author,
                "cover_reference": item.cover_reference,
                "position_seconds": pos,
                "duration_seconds": item.total_duration_seconds,
                "progress": format_progress(pos, item.total_duration_seconds),
            }
        )
    return {
        "items": items,
        "message": None if items else EMPTY_LIBRARY_MESSAGE,
    }
