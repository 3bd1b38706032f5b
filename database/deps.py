"""FastAPI dependency exposing the application's record store.

The store is created once by `main.create_app` and kept on `app.state`, so
tests can hand the app a store of their own.
"""

from fastapi import Request

from .store import RecordStore


def get_store(request: Request) -> RecordStore:
    """Return the record store attached to the running application."""
    return request.app.state.store
