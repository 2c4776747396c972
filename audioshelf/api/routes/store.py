"""Store: browse the catalog and purchase titles."""
from fastapi import APIRouter, Depends, HTTPException

from audioshelf.api.state import AppState, get_state
from audioshelf.models.catalog import CatalogItem

router = APIRouter()


def _item_to_dict(item: CatalogItem, owned: bool) -> dict:
    return {
        "id": item.id,
        "title": item.title,
        "author": item.author,
        "cover_reference": item.cover_reference,
        "duration_seconds": item.total_duration_seconds,
        "owned": owned,
        "action": "open" if owned else "buy",
    }


@router.get("")
def list_store(state: AppState = Depends(get_state)):
    """List the catalog with ownership flags."""
    return [_item_to_dict(item, owned) for item, owned in state.session.store_items()]


@router.post("/{item_id}/purchase")
def purchase(item_id: str, state: AppState = Depends(get_state)):
    """Add a catalog item to the library. Buying an owned title is a no-op."""
    item = state.session.purchase(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Audiobook not found")
    return {"ok": True, "message": f'Purchased "{item.title}"', "item": _item_to_dict(item, True)}
