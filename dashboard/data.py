"""
Query functions behind the dashboard pages.

Each function runs a single parameterized statement against the shared
engine and reshapes the rows for display. Failures are logged with the
original error and re-raised as DatabaseError carrying a fixed message.
"""
import logging
import math
from typing import List, Optional

from sqlalchemy import String, case, cast, func, or_, select
from sqlalchemy.engine import Engine

from db.database import fetch_all, fetch_one
from db.model import Customer, Invoice, Revenue as RevenueRow

from .definitions import (
    CardData,
    CustomerField,
    CustomersTable,
    InvoiceAmount,
    InvoiceForm,
    InvoicesTable,
    InvoiceStatusTotals,
    LatestInvoice,
    Revenue,
)
from .utils.api_utils import DatabaseError
from .utils.format_utils import format_currency

# Configure logging
logger = logging.getLogger(__name__)

ITEMS_PER_PAGE = 6
LATEST_INVOICES_LIMIT = 5
# Backslash is not portable as a LIKE escape (MySQL string literals consume it)
LIKE_ESCAPE = "!"

def _contains_pattern(query: str) -> str:
    """LIKE pattern matching ``query`` literally anywhere in the value."""
    escaped = (
        query.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"

def _invoice_search(query: str):
    """Case-insensitive substring match on customer and invoice fields."""
    pattern = _contains_pattern(query)
    return or_(
        func.lower(Customer.name).like(func.lower(pattern), escape=LIKE_ESCAPE),
        func.lower(Customer.email).like(func.lower(pattern), escape=LIKE_ESCAPE),
        cast(Invoice.amount, String).like(pattern, escape=LIKE_ESCAPE),
        cast(Invoice.date, String).like(pattern, escape=LIKE_ESCAPE),
        func.lower(Invoice.status).like(func.lower(pattern), escape=LIKE_ESCAPE),
    )

def fetch_revenue(engine: Engine) -> List[Revenue]:
    """Fetch every revenue row in storage order."""
    try:
        rows = fetch_all(engine, select(RevenueRow.month, RevenueRow.revenue))
        return [Revenue(**row) for row in rows]
    except Exception as e:
        logger.error(f"Database Error: {str(e)}", exc_info=True)
        raise DatabaseError("Failed to fetch revenue data.") from e

def fetch_latest_invoices(engine: Engine) -> List[LatestInvoice]:
    """Fetch the five most recent invoices with their customer details."""
    statement = (
        select(
            Invoice.amount,
            Customer.name,
            Customer.image_url,
            Customer.email,
            Invoice.id,
        )
        .join(Customer, Invoice.customer_id == Customer.id)
        .order_by(Invoice.date.desc(), Invoice.id)
        .limit(LATEST_INVOICES_LIMIT)
    )
    try:
        rows = fetch_all(engine, statement)
        return [
            LatestInvoice(**{**row, "amount": format_currency(row["amount"])})
            for row in rows
        ]
    except Exception as e:
        logger.error(f"Database Error: {str(e)}", exc_info=True)
        raise DatabaseError("Failed to fetch the latest invoices.") from e

def _status_totals(engine: Engine) -> InvoiceStatusTotals:
    statement = select(
        func.sum(case((Invoice.status == "paid", Invoice.amount), else_=0)).label("paid"),
        func.sum(case((Invoice.status == "pending", Invoice.amount), else_=0)).label("pending"),
    )
    row = fetch_one(engine, statement) or {}
    return InvoiceStatusTotals(
        paid=int(row.get("paid") or 0),
        pending=int(row.get("pending") or 0),
    )

def fetch_invoice_status_totals(engine: Engine) -> InvoiceStatusTotals:
    """Sum invoice amounts per status, in cents. Missing sums count as zero."""
    try:
        return _status_totals(engine)
    except Exception as e:
        logger.error(f"Database Error: {str(e)}", exc_info=True)
        raise DatabaseError("Failed to fetch card data.") from e

def fetch_card_data(engine: Engine) -> CardData:
    """Fetch the counts and totals shown on the dashboard cards."""
    try:
        invoice_count = fetch_one(engine, select(func.count().label("count")).select_from(Invoice))
        customer_count = fetch_one(engine, select(func.count().label("count")).select_from(Customer))
        totals = _status_totals(engine)
        return CardData(
            number_of_customers=(customer_count or {}).get("count") or 0,
            number_of_invoices=(invoice_count or {}).get("count") or 0,
            total_paid_invoices=format_currency(totals.paid),
            total_pending_invoices=format_currency(totals.pending),
        )
    except Exception as e:
        logger.error(f"Database Error: {str(e)}", exc_info=True)
        raise DatabaseError("Failed to fetch card data.") from e

def fetch_filtered_invoices(engine: Engine, query: str, current_page: int) -> List[InvoicesTable]:
    """Fetch one page of invoices matching ``query``, newest first.

    Args:
        engine: The shared database engine.
        query: Free-text search; empty matches every invoice.
        current_page: 1-based page number.

    Returns:
        At most ITEMS_PER_PAGE rows with the amount formatted as currency.
    """
    offset = (current_page - 1) * ITEMS_PER_PAGE
    statement = (
        select(
            Invoice.id,
            Invoice.customer_id,
            Invoice.amount,
            Invoice.date,
            Invoice.status,
            Customer.name,
            Customer.email,
            Customer.image_url,
        )
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(_invoice_search(query))
        .order_by(Invoice.date.desc(), Invoice.id)
        .limit(ITEMS_PER_PAGE)
        .offset(offset)
    )
    try:
        rows = fetch_all(engine, statement)
        return [
            InvoicesTable(**{**row, "amount": format_currency(row["amount"])})
            for row in rows
        ]
    except Exception as e:
        logger.error(f"Database Error: {str(e)}", exc_info=True)
        raise DatabaseError("Failed to fetch invoices.") from e

def fetch_invoices_pages(engine: Engine, query: str) -> int:
    """Number of pages needed to show every invoice matching ``query``."""
    statement = (
        select(func.count().label("count"))
        .select_from(Invoice)
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(_invoice_search(query))
    )
    try:
        row = fetch_one(engine, statement) or {}
        return math.ceil((row.get("count") or 0) / ITEMS_PER_PAGE)
    except Exception as e:
        logger.error(f"Database Error: {str(e)}", exc_info=True)
        raise DatabaseError("Failed to fetch total number of invoices.") from e

def fetch_invoice_by_id(engine: Engine, id: str) -> Optional[InvoiceForm]:
    """Fetch one invoice for editing, with the amount converted to dollars.

    Returns None when no invoice has this id.
    """
    statement = select(
        Invoice.id,
        Invoice.customer_id,
        Invoice.amount,
        Invoice.status,
    ).where(Invoice.id == id)
    try:
        row = fetch_one(engine, statement)
        if row is None:
            logger.debug(f"Invoice {id} not found")
            return None
        return InvoiceForm(**{**row, "amount": row["amount"] / 100})
    except Exception as e:
        logger.error(f"Database Error: {str(e)}", exc_info=True)
        raise DatabaseError("Failed to fetch invoice.") from e

def fetch_customers(engine: Engine) -> List[CustomerField]:
    """Fetch every customer's id and name, alphabetically."""
    try:
        rows = fetch_all(engine, select(Customer.id, Customer.name).order_by(Customer.name.asc()))
        return [CustomerField(**row) for row in rows]
    except Exception as e:
        logger.error(f"Database Error: {str(e)}", exc_info=True)
        raise DatabaseError("Failed to fetch all customers.") from e

def fetch_filtered_customers(engine: Engine, query: str) -> List[CustomersTable]:
    """Fetch customers matching ``query`` with their invoice counts and totals."""
    pattern = _contains_pattern(query)
    statement = (
        select(
            Customer.id,
            Customer.name,
            Customer.email,
            Customer.image_url,
            func.count(Invoice.id).label("total_invoices"),
            func.sum(case((Invoice.status == "pending", Invoice.amount), else_=0)).label("total_pending"),
            func.sum(case((Invoice.status == "paid", Invoice.amount), else_=0)).label("total_paid"),
        )
        .outerjoin(Invoice, Customer.id == Invoice.customer_id)
        .where(
            or_(
                func.lower(Customer.name).like(func.lower(pattern), escape=LIKE_ESCAPE),
                func.lower(Customer.email).like(func.lower(pattern), escape=LIKE_ESCAPE),
            )
        )
        .group_by(Customer.id, Customer.name, Customer.email, Customer.image_url)
        .order_by(Customer.name.asc())
    )
    try:
        rows = fetch_all(engine, statement)
        return [
            CustomersTable(**{
                **row,
                "total_pending": format_currency(row["total_pending"]),
                "total_paid": format_currency(row["total_paid"]),
            })
            for row in rows
        ]
    except Exception as e:
        logger.error(f"Database Error: {str(e)}", exc_info=True)
        raise DatabaseError("Failed to fetch customer table.") from e

def list_invoices_with_amount(engine: Engine, amount: int = 666) -> List[InvoiceAmount]:
    """List invoices with exactly ``amount`` cents, joined with the customer name.

    Errors propagate to the caller unchanged.
    """
    statement = (
        select(Invoice.amount, Customer.name)
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(Invoice.amount == amount)
    )
    return [InvoiceAmount(**row) for row in fetch_all(engine, statement)]
