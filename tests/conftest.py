"""
Pytest configuration and shared fixtures.
"""

import os
import sys
from datetime import date
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

sys.path.append(os.path.join(os.getcwd(), "src"))

from staffplan.storage.models import Base  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> None:
    """Set up test environment variables."""
    os.environ.setdefault("APP_ENV", "test")
    os.environ.setdefault("DEBUG", "true")
    os.environ.setdefault("METRICS_ENABLED", "false")


# Use in-memory SQLite for unit testing without external DB
@pytest.fixture
def session():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, expire_on_commit=False)
    session = Session()
    yield session
    session.close()
    engine.dispose()


def make_allocation(
    start_date: date,
    end_date: date,
    allocation_percent: int,
    account_id: str = "acc-1",
    display_name: str = "Ada Lovelace",
    avatar_url=None,
):
    """Lightweight allocation record for the pure calculators."""
    return SimpleNamespace(
        account_id=account_id,
        display_name=display_name,
        avatar_url=avatar_url,
        start_date=start_date,
        end_date=end_date,
        allocation_percent=allocation_percent,
    )


@pytest.fixture
def allocation_factory():
    return make_allocation
