# migrations/env.py
from alembic import context
from sqlalchemy import engine_from_config, pool

from todo_api.core.config import settings  # (1) carrega .env
from todo_api.db.base import Base
from todo_api.db.session import normalize_url

config = context.config

# (2) Alembic usará DATABASE_URL, a menos que o bootstrap já tenha definido a URL
if not config.get_main_option("sqlalchemy.url"):
    config.set_main_option("sqlalchemy.url", normalize_url(settings.DATABASE_URL).replace("%", "%%"))

target_metadata = Base.metadata

def run_migrations_offline():
    url = config.get_main_option("sqlalchemy.url")
    context.configure(url=url, target_metadata=target_metadata, literal_binds=True, render_as_batch=True)
    with context.begin_transaction():
        context.run_migrations()

def run_migrations_online():
    connectable = engine_from_config(config.get_section(config.config_ini_section), prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()

if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
