"""
Request dependencies: the shared allocation store and the service.

The store is opened once per process. `init_resources` does it at startup;
`get_db` does it on first use when the app runs without its lifespan.
"""

from typing import Iterator, Optional

from sqlalchemy.orm import Session

from staffplan.capacity.errors import StoreError
from staffplan.capacity.service import AllocationService
from staffplan.storage.postgres_adapter import PostgresAdapter, PostgresConfig
from staffplan.storage.repositories.allocation_repository import AllocationRepository
from staffplan.storage.repositories.snapshot_repository import SnapshotRepository

__all__ = [
    "get_db",
    "get_postgres_adapter",
    "get_allocation_service",
    "init_resources",
    "close_resources",
]

_postgres_adapter: Optional[PostgresAdapter] = None


def get_postgres_adapter() -> PostgresAdapter:
    global _postgres_adapter
    if _postgres_adapter is None:
        _postgres_adapter = PostgresAdapter(PostgresConfig())
    return _postgres_adapter


def init_resources() -> PostgresAdapter:
    """Open the pool and create the allocation and snapshot tables if missing."""
    adapter = get_postgres_adapter()
    if not adapter.is_connected:
        adapter.connect()
        try:
            adapter.ensure_schema()
        except StoreError:
            # Retry the whole bootstrap on the next request
            adapter.close()
            raise
    return adapter


def close_resources() -> None:
    global _postgres_adapter
    if _postgres_adapter is not None:
        _postgres_adapter.close()
        _postgres_adapter = None


def get_db() -> Iterator[Session]:
    with init_resources().get_session() as session:
        yield session


def get_allocation_service() -> AllocationService:
    return AllocationService(
        allocation_repo=AllocationRepository(),
        snapshot_repo=SnapshotRepository(),
    )
