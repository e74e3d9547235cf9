"""Database engine initialization and connection management."""

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from .schema import Base


def init_database(url: str, echo: bool = False) -> sessionmaker[Any]:
    """Initialize database and return session factory."""
    parsed = make_url(url)
    connect_args: dict[str, Any] = {}
    if parsed.get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
        # Ensure parent directory exists for file-backed SQLite
        if parsed.database and parsed.database != ":memory:":
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(url, echo=echo, connect_args=connect_args)
    Base.metadata.create_all(engine)

    return sessionmaker(bind=engine, expire_on_commit=False)
