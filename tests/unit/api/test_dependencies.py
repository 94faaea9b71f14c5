import pytest
from datetime import date
from unittest.mock import Mock

from staffplan.api import dependencies
from staffplan.capacity.errors import StoreError
from staffplan.storage.models import AllocationModel
from staffplan.storage.postgres_adapter import PostgresAdapter, PostgresConfig


@pytest.fixture
def sqlite_store(tmp_path, monkeypatch):
    adapter = PostgresAdapter(PostgresConfig(DATABASE_URL=f"sqlite:///{tmp_path / 'staffplan.db'}"))
    monkeypatch.setattr(dependencies, "_postgres_adapter", adapter)
    yield adapter
    adapter.close()


def test_get_db_bootstraps_store_on_first_use(sqlite_store):
    gen = dependencies.get_db()
    session = next(gen)
    session.add(AllocationModel(
        id="a1", project_key="PROJ", account_id="acc-1", display_name="Grace",
        start_date=date(2026, 3, 2), end_date=date(2026, 3, 6), allocation_percent=50,
    ))
    with pytest.raises(StopIteration):
        next(gen)

    assert sqlite_store.is_connected
    with sqlite_store.get_session() as check:
        assert check.get(AllocationModel, "a1").allocation_percent == 50


def test_failed_schema_bootstrap_closes_store(monkeypatch):
    adapter = Mock()
    adapter.is_connected = False
    adapter.ensure_schema.side_effect = StoreError("create capacity tables failed")
    monkeypatch.setattr(dependencies, "_postgres_adapter", adapter)

    with pytest.raises(StoreError):
        dependencies.init_resources()

    adapter.connect.assert_called_once()
    adapter.close.assert_called_once()


def test_connected_store_is_reused(monkeypatch):
    adapter = Mock()
    adapter.is_connected = True
    monkeypatch.setattr(dependencies, "_postgres_adapter", adapter)

    assert dependencies.init_resources() is adapter
    adapter.connect.assert_not_called()
    adapter.ensure_schema.assert_not_called()


def test_close_resources_drops_adapter(monkeypatch):
    adapter = Mock()
    monkeypatch.setattr(dependencies, "_postgres_adapter", adapter)

    dependencies.close_resources()

    adapter.close.assert_called_once()
    assert dependencies._postgres_adapter is None
