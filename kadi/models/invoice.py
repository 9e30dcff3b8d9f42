"""
Invoice model with embedded line items
"""

from sqlmodel import Field, SQLModel, Relationship
from sqlalchemy import Column, JSON
from datetime import date, datetime
from typing import Any, Dict, List, Optional, TYPE_CHECKING
from enum import Enum
import uuid

from kadi.models.timestamps import TIMESTAMP, utcnow

if TYPE_CHECKING:
    from kadi.models.client import Client


class InvoiceStatus(str, Enum):
    """Lifecycle status of an invoice"""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"


class Invoice(SQLModel, table=True):
    """Invoice issued by a tenant to one of its clients"""

    __tablename__ = "invoices"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    tenant_id: uuid.UUID = Field(
        foreign_key="tenants.id",
        index=True,
        description="Tenant ID for multi-tenant isolation"
    )
    client_id: uuid.UUID = Field(
        foreign_key="clients.id",
        index=True,
        description="Client billed by this invoice"
    )

    # Identification
    invoice_number: str = Field(max_length=50, index=True)

    # Dates
    issue_date: date = Field(default_factory=date.today, index=True)
    due_date: Optional[date] = None

    status: InvoiceStatus = Field(default=InvoiceStatus.DRAFT, index=True)
    notes: Optional[str] = Field(default=None, max_length=5000)
    currency: str = Field(default="USD", max_length=10)

    # Line items as [{description, quantity, unitPrice}]
    items: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    # Derived totals, persisted whenever items are replaced
    subtotal_amount: float = Field(default=0)
    total_amount: float = Field(default=0)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP)
    updated_at: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP)

    # Relationships
    client: Optional["Client"] = Relationship(sa_relationship_kwargs={"lazy": "selectin"})
