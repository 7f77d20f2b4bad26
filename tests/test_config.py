"""Tests for configuration, database setup and migration helpers."""

import sqlite3

import pytest
from sqlalchemy.pool import StaticPool

from alert_profiles.config import Settings, settings
from alert_profiles.core.migrations import (
    get_alembic_config,
    get_head_revision,
    run_migrations,
)
from alert_profiles.core.units import GlucoseUnit
from alert_profiles.database import build_engine


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.database_url.startswith("sqlite+aiosqlite")
        assert settings.glucose_unit is GlucoseUnit.MGDL
        assert settings.default_alert_type_name == "Default"
        assert settings.default_snooze_period_minutes == 60

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("GLUCOSE_UNIT", "mmol")
        monkeypatch.setenv("DEFAULT_ALERT_TYPE_NAME", "Standard")
        settings = Settings(_env_file=None)

        assert settings.glucose_unit is GlucoseUnit.MMOL
        assert settings.default_alert_type_name == "Standard"


class TestDatabase:
    """Tests for engine construction."""

    @pytest.mark.asyncio
    async def test_sqlite_uses_single_connection(self):
        engine = build_engine("sqlite+aiosqlite:///:memory:")
        try:
            assert isinstance(engine.pool, StaticPool)
        finally:
            await engine.dispose()

    @pytest.mark.asyncio
    async def test_sqlite_file_does_not_share_one_connection(self, tmp_path):
        engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'alerts.db'}")
        try:
            assert not isinstance(engine.pool, StaticPool)
        finally:
            await engine.dispose()


class TestMigrations:
    """Tests for the Alembic helpers."""

    def test_config_points_at_migrations(self):
        config = get_alembic_config()
        assert config.get_main_option("script_location").endswith("migrations")

    def test_head_revision(self):
        assert get_head_revision() == "001_alert_tables"

    def test_upgrade_creates_tables(self, tmp_path, monkeypatch):
        db_file = tmp_path / "alerts.db"
        monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{db_file}")

        run_migrations()

        with sqlite3.connect(db_file) as conn:
            tables = {
                row[0]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
            version = conn.execute("SELECT version_num FROM alembic_version").fetchone()

        assert {"alert_types", "alert_entries"} <= tables
        assert version == ("001_alert_tables",)
