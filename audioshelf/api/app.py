"""FastAPI app, CORS, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from audioshelf.api.state import AppState, get_state

# Import routes after state to avoid circular imports
from audioshelf.api.routes import library, player, status, store

__all__ = ["app", "AppState", "get_state"]

_state = get_state()


@asynccontextmanager
async def lifespan(app: FastAPI):
    session = _state.open_session()
    logging.getLogger(__name__).info(
        "Library session ready (%d owned, selected=%s)",
        len(session.ledger),
        session.selected_id,
    )

    yield

    _state.close_session()


app = FastAPI(
    title="Audioshelf API",
    description="Local REST API for the audiobook store, library and player",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(store.router, prefix="/api/store", tags=["store"])
app.include_router(library.router, prefix="/api/library", tags=["library"])
app.include_router(player.router, prefix="/api/player", tags=["player"])
app.include_router(status.router, prefix="/api/status", tags=["status"])
