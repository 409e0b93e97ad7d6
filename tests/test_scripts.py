import logging
import logging.handlers
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from config.logging import setup_logging
from config.settings import Settings, settings
from database import connection
from database.connection import open_store
from database.store import StoreConfigurationError
from database.supabase_store import SupabaseStore
from maintenance.reset_runner import SENTINEL_ID, ResetStatus
from scripts import check_duplicates, import_exercises, reset_exercises


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    for module in (reset_exercises, check_duplicates, import_exercises):
        monkeypatch.setattr(module, "setup_logging", lambda: None)


@pytest.fixture
def sqlite_settings(monkeypatch, database_url, engine):
    monkeypatch.setattr(settings, "STORE_BACKEND", "sqlalchemy")
    monkeypatch.setattr(settings, "DATABASE_URL", database_url)


async def test_reset_script(sqlite_settings, store, seed_exercises):
    await seed_exercises("Squat", "Lunge")

    assert await reset_exercises.main() == ResetStatus.success

    response = await store.table("exercises").select("id").execute()
    assert response.data == []


async def test_reset_script_without_database_url(monkeypatch, caplog):
    monkeypatch.setattr(settings, "STORE_BACKEND", "sqlalchemy")
    monkeypatch.setattr(settings, "DATABASE_URL", None)

    assert await reset_exercises.main() == ResetStatus.error
    assert any(r.exc_info and r.exc_info[0] is StoreConfigurationError for r in caplog.records)


async def test_reset_script_without_supabase_key(monkeypatch):
    monkeypatch.setattr(settings, "STORE_BACKEND", "supabase")
    monkeypatch.setattr(settings, "SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setattr(settings, "SUPABASE_KEY", None)

    assert await reset_exercises.main() == ResetStatus.error


async def test_check_duplicates_script(sqlite_settings, seed_exercises):
    await seed_exercises("Squat", "SQUAT")

    duplicates = await check_duplicates.main()

    assert [group.name for group in duplicates] == ["squat"]


async def test_import_script(sqlite_settings, store, tmp_path):
    csv_path = tmp_path / "exercises.csv"
    csv_path.write_text(
        "\ufeffexercise;youtube_short;youtube_long;muscle_group;equipment;body_region;thumbnail\n"
        "Squat;https://youtu.be/s;;Quads;Barbell;Lower Body;https://example.com/s.jpg\n",
        encoding="utf-8",
    )

    results = await import_exercises.main(csv_path)

    assert [r.success for r in results] == [True]
    response = await store.table("exercises").select("name").execute()
    assert response.data == [{"name": "Squat"}]


async def test_import_script_missing_file(tmp_path):
    assert await import_exercises.main(tmp_path / "missing.csv") == []


@pytest.fixture
def real_logging(monkeypatch, tmp_path):
    monkeypatch.setattr(reset_exercises, "setup_logging", setup_logging)
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "logs"))
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_unknown_log_level_is_rejected_by_settings():
    with pytest.raises(ValidationError):
        Settings(LOG_LEVEL="verbose")


async def test_reset_script_survives_unknown_log_level(
    monkeypatch, real_logging, sqlite_settings, seed_exercises
):
    await seed_exercises("Squat")
    monkeypatch.setattr(settings, "LOG_LEVEL", "verbose")

    assert await reset_exercises.main() == ResetStatus.success
    assert real_logging.level == logging.INFO


async def test_reset_script_survives_unwritable_log_dir(
    monkeypatch, tmp_path, real_logging, sqlite_settings
):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    monkeypatch.setattr(settings, "LOG_DIR", str(blocker / "logs"))

    assert await reset_exercises.main() == ResetStatus.success
    assert not any(
        isinstance(h, logging.handlers.RotatingFileHandler) for h in real_logging.handlers
    )


def make_supabase_client():
    client = MagicMock()
    client.postgrest.aclose = AsyncMock()
    query = client.table.return_value.delete.return_value.neq.return_value
    query.execute = AsyncMock(return_value=MagicMock(data=[{"id": "a"}]))
    return client


@pytest.fixture
def supabase_client(monkeypatch):
    monkeypatch.setattr(settings, "STORE_BACKEND", "supabase")
    monkeypatch.setattr(settings, "SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setattr(settings, "SUPABASE_KEY", "service-role-key")
    client = make_supabase_client()
    connect = AsyncMock(return_value=client)
    monkeypatch.setattr(connection, "acreate_client", connect)
    return client, connect


async def test_reset_script_over_supabase(supabase_client):
    client, connect = supabase_client

    assert await reset_exercises.main() == ResetStatus.success

    connect.assert_awaited_once_with("https://project.supabase.co", "service-role-key")
    client.table.assert_called_once_with("exercises")
    client.table.return_value.delete.return_value.neq.assert_called_once_with("id", SENTINEL_ID)
    client.postgrest.aclose.assert_awaited_once()


async def test_supabase_client_closed_when_body_raises(supabase_client):
    client, _ = supabase_client

    with pytest.raises(RuntimeError, match="boom"):
        async with open_store(settings) as store:
            assert isinstance(store, SupabaseStore)
            raise RuntimeError("boom")

    client.postgrest.aclose.assert_awaited_once()
