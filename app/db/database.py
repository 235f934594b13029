from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from app.core.config import settings
from sqlalchemy.pool import QueuePool, StaticPool
from sqlalchemy.exc import OperationalError
import logging
import json

logger = logging.getLogger(__name__)


def _json_serializer(value) -> str:
    # Keep non-ASCII text readable so tag search can match it
    return json.dumps(value, ensure_ascii=False)


def _engine_options(db_url: str) -> dict:
    if db_url.startswith("sqlite"):
        options = {
            "connect_args": {"check_same_thread": False},
            "json_serializer": _json_serializer,
        }
        # A single shared connection keeps an in-memory database alive across sessions
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    return {
        "poolclass": QueuePool,
        "pool_size": settings.DATABASE_POOL_SIZE,
        "max_overflow": settings.DATABASE_MAX_OVERFLOW,
        "pool_timeout": settings.DATABASE_POOL_TIMEOUT,
        "pool_pre_ping": True,
        "pool_recycle": settings.DATABASE_POOL_RECYCLE,
        "connect_args": {"connect_timeout": 60},
        "json_serializer": _json_serializer,
    }


try:
    db_url = settings.DATABASE_URL
    logger.info("Initializing database connection...")

    engine = create_engine(db_url, **_engine_options(db_url))

    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
        logger.info("Database connection successful")

except Exception as e:
    logger.error(f"Database connection error: {str(e)}")
    raise

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    except OperationalError as e:
        logger.error(f"Database operation failed: {str(e)}")
        db.rollback()
        raise
    finally:
        db.close()


def init_db():
    # Importing the models registers their tables on Base.metadata
    from app.models import ai_interaction, document, feedback, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
