# File: app/db/database.py
import logging
from contextlib import contextmanager
from typing import Callable, Generator, Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from app.core.config import settings
from app.core.exceptions import CampusEventsError, ConflictError, ExternalServiceError

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # Sessions are handed across threads by FastAPI's threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_recycle": 1800}


engine = create_engine(settings.DATABASE_URL, echo=settings.DB_ECHO, **_engine_kwargs(settings.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Dependency for getting database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session, on_conflict: Optional[Callable[[], Exception]] = None) -> Iterator[Session]:
    """Commit the writes made inside the block, or roll all of them back.

    Domain errors pass through unchanged. A unique-constraint violation becomes
    ``on_conflict()`` (or a generic ConflictError); any other database failure
    becomes ExternalServiceError.
    """
    try:
        yield db
        db.commit()
    except CampusEventsError:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error, rolled back: {e.orig}")
        if on_conflict is not None:
            raise on_conflict() from e
        raise ConflictError("The change conflicts with existing data") from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Database error, rolled back: {e}")
        raise ExternalServiceError("database") from e
