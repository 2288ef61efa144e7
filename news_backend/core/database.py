from contextlib import contextmanager
from typing import Callable, Generator, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from ..config import get_settings

Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    if database_url.startswith("sqlite"):
        # Sessions are handed to worker threads, see NewsSyncService
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False}
        )
    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=300,
        echo=echo
    )


settings = get_settings()
engine = build_engine(settings.database_url, echo=settings.debug)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def session_scope(session_factory: Callable[[], Session]) -> Iterator[Session]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def get_db() -> Generator[Session, None, None]:
    with session_scope(SessionLocal) as db:
        yield db


def create_tables():
    # Import models to register them with Base
    from ..models import news_article  # noqa: F401
    Base.metadata.create_all(bind=engine)


def dispose_engine():
    engine.dispose()
