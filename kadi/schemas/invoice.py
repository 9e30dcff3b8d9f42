"""
Pydantic schemas for invoices
"""

from pydantic import BaseModel, Field, field_validator
from typing import Any, List, Optional
from datetime import date, datetime
import uuid

from kadi.models.invoice import InvoiceStatus
from kadi.schemas.client import ClientRead
from kadi.schemas.common import PaginationMeta
from kadi.services.totals import to_number


class LineItem(BaseModel):
    """One invoice row; extra keys sent by the form are dropped"""
    description: str = ""
    quantity: float = 0
    unit_price: float = Field(default=0, alias="unitPrice")

    class Config:
        populate_by_name = True

    @field_validator("description", mode="before")
    @classmethod
    def coerce_description(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("quantity", "unit_price", mode="before")
    @classmethod
    def coerce_number(cls, value: Any) -> float:
        return to_number(value)

    def as_stored(self) -> dict:
        return self.model_dump(by_alias=True)


def _normalize_currency(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip().upper() or None


class InvoiceCreate(BaseModel):
    client_id: uuid.UUID
    issue_date: date = Field(default_factory=date.today)
    due_date: Optional[date] = None
    status: InvoiceStatus = InvoiceStatus.DRAFT
    notes: Optional[str] = Field(default=None, max_length=5000)
    currency: Optional[str] = Field(default=None, max_length=10)
    items: List[LineItem] = Field(default_factory=list)

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_currency(value)


class InvoiceUpdate(BaseModel):
    """Typed update command; only fields present in the request are applied"""
    client_id: Optional[uuid.UUID] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    status: Optional[InvoiceStatus] = None
    notes: Optional[str] = Field(default=None, max_length=5000)
    currency: Optional[str] = Field(default=None, max_length=10)
    items: Optional[List[LineItem]] = None

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_currency(value)

    @field_validator("client_id", "issue_date", "status", "items")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("field cannot be null")
        return value


class InvoiceRead(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    client_id: uuid.UUID
    invoice_number: str
    issue_date: date
    due_date: Optional[date] = None
    status: InvoiceStatus
    notes: Optional[str] = None
    currency: str
    items: List[LineItem]
    subtotal_amount: float
    total_amount: float
    created_at: datetime
    updated_at: Optional[datetime] = None
    client: Optional[ClientRead] = None

    class Config:
        from_attributes = True


class InvoicePage(BaseModel):
    data: List[InvoiceRead]
    pagination: PaginationMeta


class InvoiceSummary(BaseModel):
    monthly_revenue: float = Field(..., alias="monthlyRevenue")
    outstanding: float
    paid: int

    class Config:
        populate_by_name = True


class InvoiceTodo(BaseModel):
    overdue: List[InvoiceRead]
    due_soon: List[InvoiceRead] = Field(..., alias="dueSoon")
    drafts: List[InvoiceRead]

    class Config:
        populate_by_name = True


class AnalyticsTotals(BaseModel):
    revenue: float
    outstanding: float
    invoice_count: int = Field(..., alias="invoiceCount")
    average_payment_delay: float = Field(..., alias="averagePaymentDelay")

    class Config:
        populate_by_name = True


class RevenuePoint(BaseModel):
    label: str
    total: float


class ClientRevenue(BaseModel):
    company: str
    total: float


class AnalyticsCharts(BaseModel):
    revenue: List[RevenuePoint]
    top_clients: List[ClientRevenue] = Field(..., alias="topClients")
    top_products: List[RevenuePoint] = Field(..., alias="topProducts")

    class Config:
        populate_by_name = True


class AnalyticsMeta(BaseModel):
    period: str
    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")

    class Config:
        populate_by_name = True


class InvoiceAnalytics(BaseModel):
    """Dashboard figures over a chosen period and date range"""
    totals: AnalyticsTotals
    charts: AnalyticsCharts
    meta: AnalyticsMeta
