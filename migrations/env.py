import sqlalchemy
from alembic import context
from sqlalchemy.pool import NullPool

from gradepad.storage.table import metadata

config = context.config


def run_migrations_offline() -> None:
    context.configure(
        url=config.get_section_option("alembic", "sqlalchemy.url"),
        target_metadata=metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = sqlalchemy.create_engine(
        config.get_section_option("alembic", "sqlalchemy.url"),  # pyright: ignore [reportArgumentType]
        poolclass=NullPool,
    )
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
