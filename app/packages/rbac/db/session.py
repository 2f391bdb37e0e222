"""Database engine and session factory configuration."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.packages.rbac.core.config import get_settings

settings = get_settings()


def _engine_options(url: str) -> dict:
    # SQLite connections are shared with FastAPI's worker threads.
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(
    settings.sql_database_url,
    echo=settings.database_echo,
    **_engine_options(settings.sql_database_url),
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
