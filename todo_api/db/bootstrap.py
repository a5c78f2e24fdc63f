# todo_api/db/bootstrap.py
import logging
import os

from alembic import command
from alembic.config import Config
from sqlalchemy import text

from todo_api.core.config import settings
from todo_api.db.session import SQLALCHEMY_DATABASE_URL, engine

logger = logging.getLogger(__name__)

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

def check_connection() -> None:
    """Falha cedo se o banco não responde (antes de aceitar requisições)."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    logger.info("connected to database %s", engine.url.render_as_string(hide_password=True))

def run_migrations() -> None:
    # Aponta explicitamente para alembic.ini e migrations/
    cfg = Config(os.path.join(BASE_DIR, "alembic.ini"))
    cfg.set_main_option("script_location", os.path.join(BASE_DIR, "migrations"))
    cfg.set_main_option("sqlalchemy.url", SQLALCHEMY_DATABASE_URL.replace("%", "%%"))

    # Aplica todas as migrações
    command.upgrade(cfg, "head")
    logger.info("database schema is up to date")

def bootstrap_database() -> None:
    try:
        check_connection()
    except Exception:
        logger.critical("could not connect to database, aborting startup")
        raise
    if settings.AUTO_MIGRATE:
        run_migrations()
