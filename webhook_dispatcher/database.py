import logging

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger("webhook_dispatcher")

Base = declarative_base()


class Database:
    """Storage handle: one engine and session factory per process.

    Created once at startup and passed explicitly to whoever needs it.
    """

    def __init__(self, url: str):
        self.url = url
        if url.startswith("sqlite"):
            connect_args = {"check_same_thread": False}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # Share the single in-memory database across sessions
                self.engine = create_engine(
                    url, connect_args=connect_args, poolclass=StaticPool
                )
            else:
                self.engine = create_engine(url, connect_args=connect_args)
        else:
            self.engine = create_engine(url, pool_pre_ping=True)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self):
        # Import models so they are registered on Base
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Database tables ready ({self.engine.url.get_backend_name()})")

    def ping(self):
        db = self.SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()

    def dispose(self):
        self.engine.dispose()


def get_db(request: Request):
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()
