from typing import Annotated
from fastapi import Depends
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base
from sqlalchemy.pool import StaticPool
import logging

from ..core.config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str = ""):
    """Create an engine; an empty URL gives a process-lifetime in-memory SQLite database."""
    if not database_url:
        logger.info("Using database: in-memory SQLite")
        # A single shared connection keeps the in-memory database alive across sessions
        return create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )

    if database_url.startswith("sqlite"):
        logger.info("Using database: SQLite")
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=False,
        )

    logger.info("Using database: external")
    return create_engine(database_url, pool_pre_ping=True, pool_recycle=300, echo=False)


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


DbSession = Annotated[Session, Depends(get_db)]
