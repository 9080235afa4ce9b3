"""
Database connection handling.

One pooled engine is built at process start and shared by every query.
Callers pass the engine around; connections are borrowed and returned
inside each helper.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.sql.expression import Executable

from dashboard.utils.api_utils import DatabaseError

# Configure logging
logger = logging.getLogger(__name__)

def create_db_engine(
    url: str,
    pool_size: int = 10,
    max_overflow: int = 0,
    pool_timeout: int = 30,
    pool_recycle: int = 1800,
    echo: bool = False
) -> Engine:
    """Create the pooled database engine.

    No connection is opened here, so an unreachable database only
    surfaces on the first query.
    """
    options: Dict[str, Any] = {"pool_pre_ping": True, "echo": echo}
    backend = make_url(url).get_backend_name()
    if backend == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
        )
    engine = create_engine(url, **options)
    logger.info(f"Database engine created for {backend} backend")
    return engine

def get_engine(request: Request) -> Engine:
    """Dependency returning the engine created at startup.

    Raises DatabaseError when the engine could not be built, e.g. from a
    malformed DATABASE_URL.
    """
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        error = getattr(request.app.state, "engine_error", None)
        raise DatabaseError(f"Database is unavailable: {error}") from error
    return engine

def fetch_all(engine: Engine, statement: Executable) -> List[Dict[str, Any]]:
    """Run a statement and return all rows as dictionaries."""
    with engine.connect() as conn:
        result = conn.execute(statement)
        return [dict(row._mapping) for row in result]

def fetch_one(engine: Engine, statement: Executable) -> Optional[Dict[str, Any]]:
    """Run a statement and return the first row, or None."""
    with engine.connect() as conn:
        row = conn.execute(statement).first()
        return dict(row._mapping) if row else None

def fetch_scalar(engine: Engine, statement: Executable) -> Any:
    with engine.connect() as conn:
        return conn.execute(statement).scalar()

def execute(engine: Engine, statement: Executable) -> int:
    """Run a statement in its own transaction and return the affected row count."""
    with engine.begin() as conn:
        return conn.execute(statement).rowcount

def ping(engine: Engine) -> List[Dict[str, Any]]:
    """Run a trivial query to confirm connectivity."""
    return fetch_all(engine, text("SELECT 1"))
