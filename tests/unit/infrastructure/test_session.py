"""Engine construction and DB probe without a configured database."""

import pytest

from app.config.settings import AppSettings
from app.infrastructure.database import session


@pytest.fixture
def no_database(monkeypatch):
    monkeypatch.setattr(session, "get_settings", lambda: AppSettings(database_url=""))
    session.get_engine.cache_clear()
    yield
    session.get_engine.cache_clear()


def test_get_engine_requires_database_url(no_database):
    with pytest.raises(session.DatabaseNotConfiguredError):
        session.get_engine()


async def test_probe_db_reports_false_without_database(no_database):
    assert await session.probe_db() is False
