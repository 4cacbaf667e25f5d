import logging
from datetime import datetime, timezone

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DisconnectionError, OperationalError, TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from taskflow.core.errors import Unavailable

logger = logging.getLogger(__name__)

Base = declarative_base()

# connectivity failures that mean "retry later", not "bad request"
STORAGE_ERRORS = (OperationalError, PoolTimeoutError, DisconnectionError)


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in every DateTime column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Database:
    """Storage handle owned by the application.

    Nothing touches the database until ``connect()`` has been called; the
    engine lives until ``dispose()``.
    """

    def __init__(self, url: str, timeout: int = 10, **engine_kwargs):
        self.url = url
        self.timeout = timeout
        self.engine = None
        self.SessionLocal = None
        self._engine_kwargs = engine_kwargs

    @property
    def connected(self) -> bool:
        return self.engine is not None

    def connect(self):
        if self.engine is not None:
            return self.engine

        # tables must be registered on Base before create_all
        import taskflow.models  # noqa: F401

        kwargs = dict(self._engine_kwargs)
        if make_url(self.url).get_backend_name() == "sqlite":
            kwargs.setdefault("connect_args", {"check_same_thread": False, "timeout": self.timeout})
        else:
            kwargs.setdefault("connect_args", {"connect_timeout": self.timeout})
            kwargs.setdefault("pool_timeout", self.timeout)
            kwargs.setdefault("pool_pre_ping", True)

        engine = create_engine(self.url, echo=False, **kwargs)
        try:
            Base.metadata.create_all(bind=engine)
        except STORAGE_ERRORS as e:
            engine.dispose()
            logger.error("Database connection failed: %s", type(e).__name__)
            raise Unavailable() from e

        self.engine = engine
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        logger.info("Connected to %s database", engine.dialect.name)
        return engine

    def session(self) -> Session:
        if self.SessionLocal is None:
            raise Unavailable("Database is not connected")
        return self.SessionLocal()

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.SessionLocal = None


def get_db(request: Request):
    """Request-scoped DB session"""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
