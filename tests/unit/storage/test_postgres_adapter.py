import pytest
from datetime import date
from unittest.mock import patch, MagicMock
from sqlalchemy.exc import OperationalError

from staffplan.capacity.errors import StoreError
from staffplan.storage.models import AllocationModel
from staffplan.storage.postgres_adapter import PostgresAdapter, PostgresConfig


@pytest.fixture
def mock_engine():
    with patch("staffplan.storage.postgres_adapter.create_engine") as mock:
        yield mock


@pytest.fixture
def sqlite_adapter(tmp_path):
    adapter = PostgresAdapter(PostgresConfig(DATABASE_URL=f"sqlite:///{tmp_path / 'staffplan.db'}"))
    adapter.connect()
    adapter.ensure_schema()
    yield adapter
    adapter.close()


def test_url_from_parts():
    config = PostgresConfig(
        POSTGRES_USER="user", POSTGRES_PASSWORD="pw", POSTGRES_DB="plans", DATABASE_URL=None
    )

    assert config.url.render_as_string(hide_password=False) == "postgresql+psycopg2://user:pw@localhost:5432/plans"


def test_database_url_wins():
    config = PostgresConfig(POSTGRES_DB="ignored", DATABASE_URL="sqlite:///capacity.db")

    assert config.url.get_backend_name() == "sqlite"
    assert config.url.database == "capacity.db"


def test_connect_sizes_postgres_pool(mock_engine):
    config = PostgresConfig(DATABASE_URL=None, POSTGRES_POOL_SIZE=3)
    adapter = PostgresAdapter(config)

    adapter.connect()
    adapter.connect()

    mock_engine.assert_called_once()
    kwargs = mock_engine.call_args[1]
    assert kwargs["pool_size"] == 3
    assert kwargs["max_overflow"] == config.POSTGRES_MAX_OVERFLOW
    assert adapter.is_connected


def test_unit_of_work_commits(sqlite_adapter):
    with sqlite_adapter.get_session() as session:
        session.add(AllocationModel(
            id="a1", project_key="PROJ", account_id="acc-1", display_name="Grace",
            start_date=date(2026, 3, 2),
            end_date=date(2026, 3, 6),
            allocation_percent=100,
        ))

    with sqlite_adapter.get_session() as session:
        assert session.get(AllocationModel, "a1").display_name == "Grace"

    assert sqlite_adapter.health_check() is True


def test_commit_failure_is_store_error():
    adapter = PostgresAdapter(PostgresConfig())
    mock_session = MagicMock()
    mock_session.commit.side_effect = OperationalError("COMMIT", {}, Exception("server closed the connection"))
    adapter._session_factory = MagicMock(return_value=mock_session)

    with pytest.raises(StoreError) as exc_info:
        with adapter.get_session():
            pass

    assert isinstance(exc_info.value.__cause__, OperationalError)
    mock_session.rollback.assert_called_once()
    mock_session.close.assert_called_once()


def test_error_inside_unit_of_work_rolls_back():
    adapter = PostgresAdapter(PostgresConfig())
    mock_session = MagicMock()
    adapter._session_factory = MagicMock(return_value=mock_session)

    with pytest.raises(ValueError):
        with adapter.get_session():
            raise ValueError("bad input")

    mock_session.commit.assert_not_called()
    mock_session.rollback.assert_called_once()


def test_unconnected_adapter():
    adapter = PostgresAdapter(PostgresConfig())

    assert adapter.is_connected is False
    assert adapter.health_check() is False
    with pytest.raises(StoreError):
        adapter.ensure_schema()
    with pytest.raises(StoreError):
        with adapter.get_session():
            pass


def test_close_forgets_engine(sqlite_adapter):
    sqlite_adapter.close()

    assert sqlite_adapter.is_connected is False
    assert sqlite_adapter.health_check() is False
