from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine
from sqlmodel import Session, SQLModel, create_engine

from modelshop.core.config import settings
from modelshop.core.observability import get_logger

logger = get_logger(__name__)


def build_engine(url: str | None = None) -> Engine:
    url = url or settings.SQLALCHEMY_DATABASE_URI
    engine_kwargs: dict[str, Any] = {"echo": settings.LOG_SQL}

    if url.startswith("sqlite"):
        # Sessions are used from FastAPI's threadpool
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs.update(
            {
                "pool_pre_ping": settings.DATABASE_POOL_PRE_PING,
                "pool_recycle": settings.DATABASE_POOL_RECYCLE,
                "pool_size": settings.DATABASE_POOL_SIZE,
                "max_overflow": settings.DATABASE_MAX_OVERFLOW,
                "connect_args": {
                    "connect_timeout": 10,
                    "application_name": settings.PROJECT_NAME,
                },
            }
        )

    return create_engine(url, **engine_kwargs)


engine = build_engine()


# make sure all SQLModel models are imported (modelshop.models) before
# initializing DB, otherwise the metadata is incomplete
def init_db(bind: Engine | None = None) -> None:
    import modelshop.models  # noqa: F401

    bind = bind or engine
    SQLModel.metadata.create_all(bind)
    logger.info("Database schema ensured", url=bind.url.render_as_string())


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
