"""
Postgres backing store for allocations and capacity snapshots.

Every driver failure leaving this module is a StoreError, including those
raised when a unit of work commits, so callers only ever see the capacity
error taxonomy.
"""

from contextlib import contextmanager
from typing import Iterator, Optional
import logging

from pydantic import SecretStr
from pydantic_settings import BaseSettings
from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from staffplan.capacity.errors import StoreError
from .base import StorageAdapter, store_errors
from .models import Base

logger = logging.getLogger(__name__)


class PostgresConfig(BaseSettings):
    """POSTGRES_* settings; DATABASE_URL, when set, replaces them all."""
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: SecretStr = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "staffplan"
    POSTGRES_POOL_SIZE: int = 5
    POSTGRES_MAX_OVERFLOW: int = 10
    DATABASE_URL: Optional[str] = None

    model_config = {"env_file": ".env", "extra": "ignore"}

    @property
    def url(self) -> URL:
        if self.DATABASE_URL:
            return make_url(self.DATABASE_URL)
        return URL.create(
            "postgresql+psycopg2",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD.get_secret_value(),
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            database=self.POSTGRES_DB,
        )


class PostgresAdapter(StorageAdapter):
    def __init__(self, config: PostgresConfig):
        self.config = config
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    def connect(self) -> None:
        if self._engine is not None:
            return

        url = self.config.url
        logger.info(f"Connecting allocation store at {url.render_as_string(hide_password=True)}")

        options = {"pool_pre_ping": True}
        # Pool sizing only applies to the Postgres queue pool
        if url.get_backend_name() == "postgresql":
            options["pool_size"] = self.config.POSTGRES_POOL_SIZE
            options["max_overflow"] = self.config.POSTGRES_MAX_OVERFLOW

        with store_errors("connect allocation store"):
            self._engine = create_engine(url, **options)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._session_factory = None
        logger.info("Allocation store pool closed.")

    def health_check(self) -> bool:
        if self._engine is None:
            return False
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Allocation store failed its health check")
            return False
        return True

    def ensure_schema(self) -> None:
        if self._engine is None:
            raise StoreError("Allocation store is not connected")
        with store_errors("create capacity tables"):
            Base.metadata.create_all(self._engine)
        logger.info("Allocation and snapshot tables ensured.")

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        if self._session_factory is None:
            raise StoreError("Allocation store is not connected")

        session = self._session_factory()
        try:
            yield session
            with store_errors("commit"):
                session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
