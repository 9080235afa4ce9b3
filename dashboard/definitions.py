"""Row shapes returned by the dashboard query functions."""
import datetime

from pydantic import BaseModel


class Revenue(BaseModel):
    month: str
    revenue: int

class LatestInvoice(BaseModel):
    id: str
    name: str
    image_url: str
    email: str
    amount: str

class CardData(BaseModel):
    number_of_customers: int
    number_of_invoices: int
    total_paid_invoices: str
    total_pending_invoices: str

class InvoiceStatusTotals(BaseModel):
    """Raw paid and pending sums, in cents."""
    paid: int
    pending: int

class InvoicesTable(BaseModel):
    id: str
    customer_id: str
    name: str
    email: str
    image_url: str
    date: datetime.date
    amount: str
    status: str  # pending|paid

class InvoiceForm(BaseModel):
    id: str
    customer_id: str
    amount: float  # dollars
    status: str  # pending|paid

class CustomerField(BaseModel):
    id: str
    name: str

class CustomersTable(BaseModel):
    id: str
    name: str
    email: str
    image_url: str
    total_invoices: int
    total_pending: str
    total_paid: str

class InvoiceAmount(BaseModel):
    amount: int
    name: str
