import logging
from typing import Callable, Iterator, Optional

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

# Create Base class for models
Base = declarative_base()


class Database:
    """
    Explicit handle to the document store.

    Owned by the application lifespan: ``init()`` on startup, ``dispose()`` on
    shutdown. Services receive sessions from this object instead of reaching
    for a module-level engine.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    def init(self, create_tables: bool = True) -> None:
        """Create the engine and session factory, then register the tables."""
        if self.url.startswith("sqlite"):
            # In-memory SQLite must share a single connection across threads
            self.engine = create_engine(
                self.url,
                echo=self.echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                self.url,
                echo=self.echo,
                pool_pre_ping=True,  # Verify connections before using them
                pool_size=10,
                max_overflow=20,
            )

        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        if create_tables:
            from talentmatch.models import recruiter, job, candidate, match  # noqa: F401  register models
            Base.metadata.create_all(bind=self.engine)

        logger.info("Database initialized", extra={"dialect": self.engine.dialect.name})

    def dispose(self) -> None:
        """Release pooled connections; the handle can be re-initialized afterwards."""
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Database connections disposed")
        self.engine = None
        self._session_factory = None

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not initialized; call init() first")
        return self._session_factory()


def get_db(request: Request) -> Iterator[Session]:
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    database: Database = request.app.state.database
    db = database.session()
    try:
        yield db
    finally:
        db.close()


def get_session_factory(request: Request) -> Callable[[], Session]:
    """
    Dependency returning the session factory itself.

    For work handed to another thread: that thread opens and closes its own
    session, the request-scoped one from get_db stays on the request thread.
    """
    database: Database = request.app.state.database
    return database.session
