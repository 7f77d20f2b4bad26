"""Database migration utilities."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from alembic.script import ScriptDirectory

from alert_profiles.logging_config import get_logger

logger = get_logger(__name__)

# Repository root: holds alembic.ini and migrations/
APP_ROOT = Path(__file__).parent.parent.parent


def get_alembic_config() -> Config:
    """Get Alembic configuration.

    Raises:
        FileNotFoundError: If alembic.ini is missing.
    """
    alembic_ini = APP_ROOT / "alembic.ini"

    if not alembic_ini.exists():
        raise FileNotFoundError(f"alembic.ini not found at {alembic_ini}")

    config = Config(str(alembic_ini))
    config.set_main_option("script_location", str(APP_ROOT / "migrations"))

    return config


def run_migrations() -> None:
    """Upgrade the database to the latest revision."""
    logger.info("Running database migrations...")

    try:
        config = get_alembic_config()
        config.attributes["configure_logger"] = False
        command.upgrade(config, "head")
    except Exception:
        logger.exception("Database migration failed")
        raise

    logger.info("Database migrations completed successfully")


def get_head_revision() -> str | None:
    """Latest revision known to the migration scripts."""
    script = ScriptDirectory.from_config(get_alembic_config())
    return script.get_current_head()
