"""Shared application state (injected into routes)."""
from typing import Optional

from fastapi import HTTPException

from audioshelf.config import STORAGE_PATH, ensure_data_dir
from audioshelf.core.kv_store import JsonFileKeyValueStore, KeyValueStore
from audioshelf.core.persist_writer import PersistWriter
from audioshelf.core.session import LibrarySession


class AppState:
    def __init__(self, session: Optional[LibrarySession] = None) -> None:
        self._session = session

    def open_session(self, store: Optional[KeyValueStore] = None) -> LibrarySession:
        """Load the library session from storage (JSON file by default)."""
        if self._session is not None:
            return self._session
        if store is None:
            ensure_data_dir()
            store = JsonFileKeyValueStore(STORAGE_PATH)
        writer = PersistWriter(store)
        writer.start()
        self._session = LibrarySession.open(store, writer=writer)
        return self._session

    def close_session(self) -> None:
        if self._session is not None:
            self._session.close()
            self._session = None

    @property
    def session(self) -> LibrarySession:
        if self._session is None:
            raise HTTPException(status_code=503, detail="Library not loaded yet")
        return self._session


_state = AppState()


def get_state() -> AppState:
    return _state
