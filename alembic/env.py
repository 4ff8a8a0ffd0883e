from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from leadscore.core.config import settings
from leadscore.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def sync_database_url(url: str) -> str:
    """Migrations run synchronously: swap the asyncpg driver for psycopg2."""
    return url.replace("postgresql+asyncpg://", "postgresql+psycopg2://", 1)


config.set_main_option("sqlalchemy.url", sync_database_url(settings.DATABASE_URL))

# Check constraints and indexes are declared on the models as well, so
# autogenerate diffs stay empty after 0001.
target_metadata = Base.metadata

CONFIGURE_OPTIONS = {"target_metadata": target_metadata, "compare_type": True}


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **CONFIGURE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, **CONFIGURE_OPTIONS)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
