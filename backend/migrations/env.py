import os
import sys
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import make_url
from alembic import context

# ---- add the backend directory to sys.path ----
current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.abspath(os.path.join(current_dir, ".."))
sys.path.insert(0, project_root)

from familygen.config import ASYNC_DB_URL  # noqa: E402
from familygen.models import Base  # noqa: E402

# Alembic config object
config = context.config

# logging config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# metadata of every model
target_metadata = Base.metadata


def get_db_url() -> str:
    """
    DB URL priority:
    1) env ALEMBIC_DB_URL
    2) env DATABASE_URL
    3) the app's ASYNC_DATABASE_URL with its sync driver
    4) sqlalchemy.url from alembic.ini (fallback)
    """
    env_url = os.getenv("ALEMBIC_DB_URL") or os.getenv("DATABASE_URL")
    if env_url:
        return env_url
    if ASYNC_DB_URL:
        url = make_url(ASYNC_DB_URL)
        return url.set(drivername=url.get_backend_name()).render_as_string(hide_password=False)
    return config.get_main_option("sqlalchemy.url")


def run_migrations_offline() -> None:
    """offline mode (emit SQL only)"""
    url = get_db_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """online mode (apply to the database)"""
    configuration = config.get_section(config.config_ini_section) or {}

    # always override the URL from the ini file
    configuration["sqlalchemy.url"] = get_db_url()

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
