"""Business event trail written to the ``logs`` table."""

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from modelshop.core.observability import get_logger
from modelshop.models import AuditLog

logger = get_logger(__name__)


def log_event(session: Session, event: str, description: str) -> None:
    """
    Record a business event in its own commit.

    A failure to write the trail is logged and swallowed; it must never fail
    the request that triggered it.
    """
    logger.info("Audit event", audit_event=event, description=description)
    try:
        session.add(AuditLog(event=event, description=description))
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(
            "Failed to write audit event",
            audit_event=event,
            error=str(e),
            exc_info=True,
        )
