"""
Idempotent database seeding.

Creates the four dashboard tables when missing and loads the placeholder
rows from ``seed_data``. Rows whose primary key already exists are skipped,
so the routine can be re-run safely. Each table is seeded in turn; the
inserts for one table run concurrently and are joined before the next
table starts. Nothing wraps the whole routine in a transaction.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Type

import bcrypt
from pydantic import BaseModel, Field
from sqlalchemy import insert
from sqlalchemy.engine import Engine

from . import seed_data
from .database import execute
from .model import Base, Customer, Invoice, Revenue, User

# Configure logging
logger = logging.getLogger(__name__)

class SeedReport(BaseModel):
    """Rows inserted per table during one seeding run."""
    inserted: Dict[str, int] = Field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.inserted.values())

def hash_password(password: str, rounds: int = 10) -> str:
    """One-way hash a clear-text password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")

def insert_ignore(model: Type[Base], row: Dict[str, Any]):
    """Build an INSERT that is skipped when the primary key already exists."""
    return (
        insert(model)
        .values(**row)
        .prefix_with("IGNORE", dialect="mysql")
        .prefix_with("OR IGNORE", dialect="sqlite")
    )

def _seed_table(
    engine: Engine,
    model: Type[Base],
    rows: List[Dict[str, Any]],
    max_workers: int,
    prepare: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = None
) -> int:
    table_name = model.__tablename__
    model.__table__.create(bind=engine, checkfirst=True)

    def _insert(row: Dict[str, Any]) -> int:
        if prepare is not None:
            row = prepare(row)
        return execute(engine, insert_ignore(model, row))

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=f"seed-{table_name}") as pool:
        futures = [pool.submit(_insert, row) for row in rows]

    # The executor has joined every insert; surface the first failure
    inserted = 0
    for future in futures:
        inserted += max(future.result(), 0)

    logger.info(f"Seeded {table_name}: {inserted} inserted, {len(rows) - inserted} skipped")
    return inserted

def seed_users(engine: Engine, max_workers: int = 8, bcrypt_rounds: int = 10) -> int:
    def _hash(user: Dict[str, Any]) -> Dict[str, Any]:
        return {**user, "password": hash_password(user["password"], bcrypt_rounds)}

    return _seed_table(engine, User, seed_data.users, max_workers, prepare=_hash)

def seed_customers(engine: Engine, max_workers: int = 8) -> int:
    return _seed_table(engine, Customer, seed_data.customers, max_workers)

def seed_invoices(engine: Engine, max_workers: int = 8) -> int:
    return _seed_table(engine, Invoice, seed_data.invoices, max_workers)

def seed_revenue(engine: Engine, max_workers: int = 8) -> int:
    return _seed_table(engine, Revenue, seed_data.revenue, max_workers)

def seed_database(engine: Engine, max_workers: int = 8, bcrypt_rounds: int = 10) -> SeedReport:
    """Seed users, customers, invoices and revenue, in that order.

    Args:
        engine: The shared database engine.
        max_workers: Number of inserts dispatched concurrently per table.
        bcrypt_rounds: Cost factor for hashing user passwords.

    Returns:
        SeedReport with the number of rows actually inserted per table.

    Raises:
        Whatever the driver raised for the first failing statement. Rows
        committed before the failure stay in place.
    """
    report = SeedReport()
    report.inserted["users"] = seed_users(engine, max_workers, bcrypt_rounds)
    report.inserted["customers"] = seed_customers(engine, max_workers)
    report.inserted["invoices"] = seed_invoices(engine, max_workers)
    report.inserted["revenue"] = seed_revenue(engine, max_workers)
    logger.info(f"Database seeded: {report.total} rows inserted")
    return report
