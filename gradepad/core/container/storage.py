from __future__ import annotations

import typing as t
from pathlib import Path

import alembic.config
import sqlalchemy
import sqlalchemy.event
import sqlalchemy.orm
from dependency_injector.containers import DeclarativeContainer
from dependency_injector.providers import Configuration, Container, Factory, Object, Provider, Resource, Singleton
from sqlalchemy.engine.url import URL as DSN

import gradepad.lib.json as json

from ..config.secrets import PostgresqlSecrets
from ..config.storage import PersistentSettings
from ..di import NotReady
from ..provider import LoggingProvider


def provide_dsn(config: dict[str, t.Any], secrets: dict[str, t.Any] | None) -> DSN:
    settings = PersistentSettings(config)
    credentials = PostgresqlSecrets(secrets)
    if settings.postgresql is not None:
        pg = settings.postgresql
        return DSN.create(
            pg.driver,
            database=pg.database,
            username=credentials.username.get_secret_value() if credentials.username else None,
            password=credentials.password.get_secret_value() if credentials.password else None,
            port=pg.port,
            host=str(pg.host) if pg.host else None,
        )
    assert settings.sqlite is not None
    path = settings.sqlite.path
    return DSN.create(settings.sqlite.driver, database=str(path) if path else None)


def provide_alembic_conf(migration_path: Path, dsn: DSN, root: Path | NotReady) -> alembic.config.Config:
    if isinstance(root, NotReady):
        raise RuntimeError("root path is unavailable")

    escaped_str = dsn.render_as_string(hide_password=False).replace("%", "%%")

    ac = alembic.config.Config()
    ac.set_main_option("script_location", str(root / migration_path))
    ac.set_section_option("alembic", "sqlalchemy.url", escaped_str)
    ac.set_section_option("alembic", "file_template", "%%(year)d-%%(month).2d-%%(day).2d-%%(slug)s-%%(rev)s")
    return ac


def provide_engine(dsn: DSN, logging: LoggingProvider) -> sqlalchemy.Engine:
    logger = logging.get_logger()

    engine = sqlalchemy.create_engine(dsn, json_serializer=json.dumps, json_deserializer=json.loads)
    match engine.dialect.name:
        case "postgresql":
            sqlalchemy.event.listen(engine, "connect", register_timezone)
        case "sqlite":
            sqlalchemy.event.listen(engine, "connect", register_foreign_keys)
    logger.info(
        "initialized SQLAlchemy engine",
        extra={
            "driver": dsn.drivername,
            "database": dsn.database,
            "host": dsn.host,
            "port": dsn.port,
        },
    )
    return engine


def provide_session(engine: sqlalchemy.Engine) -> sqlalchemy.orm.Session:
    """Create a new session. Caller is responsible for closing it (via di.Manage)."""
    maker = sqlalchemy.orm.sessionmaker(engine, expire_on_commit=False, autoflush=False)
    return maker(autobegin=False)


class PersistentContainer(DeclarativeContainer):
    config = Configuration()
    secrets = Configuration()
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    dsn: Provider[DSN] = Singleton(
        provide_dsn,
        config=config,
        secrets=secrets.postgresql,
    )
    alembic_config: Provider[alembic.config.Config] = Singleton(
        provide_alembic_conf, migration_path=Path("migrations/"), dsn=dsn, root=root
    )
    engine: Provider[sqlalchemy.Engine] = Singleton(provide_engine, dsn=dsn, logging=logging)
    session: Provider[sqlalchemy.orm.Session] = Factory(provide_session, engine=engine)


class StorageContainer(DeclarativeContainer):
    config = Configuration(strict=True)
    secrets = Configuration(strict=True)
    logging: Provider[LoggingProvider] = Resource()
    root: Provider[Path | NotReady] = Object()

    persistent: Provider[PersistentContainer] = Container(
        PersistentContainer, config=config.persistent, secrets=secrets, logging=logging, root=root
    )


def register_foreign_keys(dbapi_conn: t.Any, _: t.Any) -> None:
    """SQLite leaves foreign keys, and so ON DELETE CASCADE, off unless asked per connection."""
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def register_timezone(dbapi_conn: t.Any, _: t.Any) -> None:
    """Set connection timezone to UTC for consistent datetime handling."""
    cursor = dbapi_conn.cursor()
    cursor.execute("SET TIMEZONE TO 'UTC'")
    cursor.close()
