from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from curator.core.logging import get_logger
from curator.core.settings import get_settings

logger = get_logger(__name__)

Base = declarative_base()

# Global engine instance
_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def _engine_kwargs(database_url: str) -> dict:
    settings = get_settings()
    if database_url.startswith("sqlite"):
        # The Discord adapter runs the pipeline on worker threads
        return {"connect_args": {"check_same_thread": False}, "echo": settings.debug}
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_pre_ping": True,
        "echo": settings.debug,
    }


def init_db(create_tables: bool = False) -> None:
    """Initialize database engine and session factory.

    ``create_tables`` is for local runs without migrations; production
    schemas come from Alembic.
    """
    global _engine, _SessionLocal

    if _engine is not None:
        return

    settings = get_settings()
    _engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))
    # Rows are handed across layers after their session closes
    _SessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=_engine
    )

    if create_tables:
        # Register models on Base.metadata before create_all
        from curator.models import schema  # noqa: F401

        Base.metadata.create_all(bind=_engine)

    logger.info("Database initialized successfully")


def get_session_factory() -> sessionmaker:
    """Get the session factory, initializing if necessary."""
    if _SessionLocal is None:
        init_db()
    return _SessionLocal

