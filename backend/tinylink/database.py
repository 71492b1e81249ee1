from datetime import timezone

from sqlalchemy import DateTime, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.types import TypeDecorator

from .config import Settings

# Base class for models
Base = declarative_base()


class UTCDateTime(TypeDecorator):
    """
    Timezone-aware datetime stored as UTC.

    SQLite keeps no offset, so values are written as naive UTC and tagged
    as UTC again when loaded.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None or value.tzinfo is None:
            return value
        value = value.astimezone(timezone.utc)
        if dialect.name == "sqlite":
            value = value.replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


def build_engine(settings: Settings) -> Engine:
    """
    Create the SQLAlchemy engine for the configured database.

    SQLite connections get WAL journaling and a busy timeout so that
    concurrent writers wait for the lock instead of failing immediately.
    """
    url = settings.DATABASE_URL

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.DB_TIMEOUT
            },
            pool_pre_ping=True
        )

        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute(f"PRAGMA busy_timeout={settings.DB_TIMEOUT * 1000}")
            cursor.close()

        return engine

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_timeout=settings.DB_TIMEOUT
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    # Records are handed back to callers after the session is closed
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
