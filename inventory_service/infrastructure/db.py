from sqlalchemy import create_engine, text, Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError
from fastapi import Request
from typing import Iterator
from inventory_service.core_settings import Settings
from inventory_service.domain.errors import StoreUnavailableError
from inventory_service.domain.models import Base

class Database:
    """Owns the engine (connection pool) and hands out one session per unit of work."""

    def __init__(self, url: str, **engine_kwargs):
        engine_kwargs.setdefault("pool_pre_ping", True)
        self.engine: Engine = create_engine(url, echo=False, future=True, **engine_kwargs)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False)

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        url = settings.database_url
        kwargs = {}
        if url.startswith("postgresql"):
            kwargs = {
                "pool_size": settings.DB_POOL_SIZE,
                "max_overflow": settings.DB_MAX_OVERFLOW,
                "connect_args": {"options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"},
            }
        return cls(url, **kwargs)

    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            # Anything not committed by the service is rolled back here
            db.close()

    def init_models(self):
        Base.metadata.create_all(self.engine)

    def ping(self):
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1")).fetchone()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Database unreachable: {e}") from e

    def dispose(self):
        self.engine.dispose()

def get_db(request: Request) -> Iterator[Session]:
    database: Database = request.app.state.database
    yield from database.session()
