"""Transaction boundary for service-level writes."""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from modelshop.core.observability import get_logger

from .repositories.base import DatabaseError

logger = get_logger(__name__)


@contextmanager
def transaction(session: Session) -> Generator[Session, None, None]:
    """
    Commit everything staged inside the block, or roll all of it back.

    SQLAlchemy failures surface as DatabaseError; any other exception is
    re-raised unchanged after the rollback.
    """
    try:
        yield session
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Transaction rolled back", error=str(e), exc_info=True)
        raise DatabaseError(f"Transaction failed: {str(e)}") from e
    except Exception:
        session.rollback()
        raise
