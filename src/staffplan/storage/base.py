from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import ContextManager, Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from staffplan.capacity.errors import StoreError


@contextmanager
def store_errors(operation: str) -> Iterator[None]:
    """Re-raise driver failures as StoreError, chaining the original."""
    try:
        yield
    except SQLAlchemyError as exc:
        raise StoreError(f"{operation} failed: {exc}") from exc


class StorageAdapter(ABC):
    """Backend holding allocations and capacity snapshots."""

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        pass

    @abstractmethod
    def connect(self) -> None:
        """Open the connection pool."""

    @abstractmethod
    def close(self) -> None:
        pass

    @abstractmethod
    def health_check(self) -> bool:
        """True when a trivial query round-trips."""

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create the allocation and snapshot tables when missing."""

    @abstractmethod
    def get_session(self) -> ContextManager[Session]:
        """One unit of work: committed on success, rolled back on any error."""
