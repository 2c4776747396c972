"""Persistence health."""
from fastapi import APIRouter, Depends

from audioshelf.api.state import AppState, get_state

router = APIRouter()


@router.get("")
def get_status(state: AppState = Depends(get_state)):
    """Report whether the last writes reached storage."""
    return {"persistence": state.session.persistence_status()}
