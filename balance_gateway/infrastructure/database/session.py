"""Database engine and session management with connection pooling"""

from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from balance_gateway.config import Settings, settings as default_settings
from balance_gateway.infrastructure.database.models import Base


class Database:
    """Owns one pooled engine and the session factory bound to it"""

    def __init__(self, database_url: str, settings: Settings | None = None):
        settings = settings or default_settings
        self.url = make_url(database_url)

        if self.url.get_backend_name() == "sqlite":
            # Sessions are opened from worker threads by the async adapters
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            if self.url.database in (None, "", ":memory:"):
                # Each connection to :memory: is a fresh database, so share one
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs = {
                "pool_pre_ping": True,  # Verify connections before using
                "pool_size": settings.db_pool_size,
                "max_overflow": settings.db_max_overflow,
                "pool_recycle": settings.db_pool_recycle_seconds,
            }

        self.engine = create_engine(self.url, **engine_kwargs)
        self.session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Database":
        settings = settings or default_settings
        return cls(settings.database_url, settings)

    def session(self) -> Session:
        return self.session_factory()

    def create_tables(self) -> None:
        """Create any missing tables (local development and tests)"""
        Base.metadata.create_all(bind=self.engine)

    def dispose(self) -> None:
        """Close all pooled connections"""
        self.engine.dispose()


def session_scope(database: Database) -> Generator[Session, None, None]:
    """Yield a session that is always closed afterwards"""
    db = database.session()
    try:
        yield db
    finally:
        db.close()
