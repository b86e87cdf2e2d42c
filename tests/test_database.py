from unittest.mock import MagicMock, patch

import pytest

from coaching_api import database
from coaching_api.errors import BackendError, NotFoundError
from coaching_api.services.crud_service import TableService

from fakes import FakeAPIError


@pytest.fixture
def no_cached_client(monkeypatch):
    monkeypatch.setattr(database, "_client", None)


def test_unconfigured_client_raises_backend_error(no_cached_client, test_settings, monkeypatch):
    monkeypatch.setattr(test_settings, "SUPABASE_URL", None)
    with pytest.raises(BackendError, match="Database connection unavailable"):
        database.get_supabase_client()


def test_client_is_created_once(no_cached_client, test_settings, monkeypatch):
    monkeypatch.setattr(test_settings, "SUPABASE_URL", "https://test.supabase.co")
    monkeypatch.setattr(test_settings, "SUPABASE_SERVICE_ROLE_KEY", "service-key")
    with patch("coaching_api.database.create_client", return_value=MagicMock()) as mock_create:
        first = database.get_db()
        second = database.get_db()

    assert first is second
    mock_create.assert_called_once_with("https://test.supabase.co", "service-key")


def test_anon_key_is_the_fallback(test_settings, monkeypatch):
    monkeypatch.setattr(test_settings, "SUPABASE_SERVICE_ROLE_KEY", None)
    monkeypatch.setattr(test_settings, "SUPABASE_ANON_KEY", "anon-key")
    assert test_settings.supabase_key == "anon-key"


def test_execute_wraps_backend_errors():
    query = MagicMock()
    query.execute.side_effect = FakeAPIError("permission denied")

    with pytest.raises(BackendError) as exc_info:
        database.execute(query, "things insert")

    assert exc_info.value.message == "permission denied"
    assert exc_info.value.status_code == 500


class TestTableService:
    def test_insert_and_get(self, fake_db):
        things = TableService(fake_db, "things")
        row = things.insert({"name": "a"})
        assert things.get(row["id"])["name"] == "a"
        assert things.get("missing") is None

    def test_list_skips_none_filters(self, fake_db):
        fake_db.seed("things", {"kind": "x"}, {"kind": "y"})
        things = TableService(fake_db, "things")
        assert len(things.list({"kind": None})) == 2
        assert [r["kind"] for r in things.list({"kind": "y"})] == ["y"]

    def test_update_missing_row_is_not_found(self, fake_db):
        with pytest.raises(NotFoundError):
            TableService(fake_db, "things").update("nope", {"name": "b"})

    def test_insert_returning_nothing_is_backend_error(self):
        client = MagicMock()
        client.table.return_value.insert.return_value.execute.return_value = MagicMock(data=[])
        with pytest.raises(BackendError, match="returned no rows"):
            TableService(client, "things").insert({"name": "a"})
