"""FastAPI dependencies for backend services."""

from typing import Iterator

from fastapi import Request

from uslex.core.store import ProvisionStore


def get_store(request: Request) -> Iterator[ProvisionStore]:
    """Dependency to provide a read-only provision store.

    Opens a fresh connection for each request and closes it afterwards.
    """
    store = ProvisionStore(request.app.state.db_path, read_only=True)
    try:
        yield store
    finally:
        store.close()
