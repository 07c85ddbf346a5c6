from __future__ import annotations

import pytest

from app.config import get_analytics_settings, get_order_import_settings
from app.main import create_app


@pytest.fixture()
def fresh_settings():
    get_order_import_settings.cache_clear()
    get_analytics_settings.cache_clear()
    yield
    get_order_import_settings.cache_clear()
    get_analytics_settings.cache_clear()


def test_malformed_numbers_fall_back_to_defaults(monkeypatch, fresh_settings) -> None:
    monkeypatch.setenv("ORDER_IMPORT_MAX_ROWS", "lots")
    monkeypatch.setenv("ORDER_IMPORT_LOOKUP_CHUNK_SIZE", "0")
    monkeypatch.setenv("ANALYTICS_MAX_RANGE_DAYS", "")

    settings = get_order_import_settings()

    assert settings.max_rows_per_import == 2000
    assert settings.lookup_chunk_size == 1
    assert get_analytics_settings().max_range_days == 366


def test_app_starts_with_malformed_import_settings(monkeypatch, fresh_settings) -> None:
    monkeypatch.setenv("ORDER_IMPORT_MAX_ROWS", "lots")

    application = create_app()

    assert application.title == "BizTrack Pro API"


def test_app_refuses_to_start_without_database_url(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("LOCAL_DATABASE_URL", raising=False)

    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        create_app()
