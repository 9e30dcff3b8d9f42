"""
Invoice data access, aggregation and follow-up lists
"""

from datetime import date, timedelta
from typing import Any, Dict, List, Mapping, Optional, Tuple
import uuid

from sqlalchemy import and_, or_
from sqlmodel import select
import structlog

from kadi.core.errors import ValidationError
from kadi.core.tenancy import TenantContext
from kadi.models.invoice import Invoice, InvoiceStatus
from kadi.repositories.base import TenantScopedRepository
from kadi.repositories.clients import ClientRepository
from kadi.services.numbering import InvoiceNumberGenerator, TimestampInvoiceNumbering
from kadi.services.totals import compute_totals

logger = structlog.get_logger(__name__)

UNKNOWN_CLIENT_MESSAGE = "Client introuvable pour ce compte."
TODO_LIMIT = 5
DUE_SOON_DAYS = 7


def start_of_month(today: date) -> date:
    return today.replace(day=1)


def start_of_next_month(today: date) -> date:
    if today.month == 12:
        return date(today.year + 1, 1, 1)
    return date(today.year, today.month + 1, 1)


def summarize(rows: List[Tuple[InvoiceStatus, Optional[date], Optional[float]]], today: date) -> Dict[str, Any]:
    """Dashboard figures over (status, issue_date, total_amount) rows.

    Revenue only counts invoices paid this month while the paid count spans
    every invoice ever paid.
    """
    month_start = start_of_month(today)
    next_month = start_of_next_month(today)

    monthly_revenue = 0.0
    outstanding = 0.0
    paid = 0
    for status, issue_date, total_amount in rows:
        amount = float(total_amount or 0)
        if status == InvoiceStatus.PAID:
            paid += 1
            if issue_date is not None and month_start <= issue_date < next_month:
                monthly_revenue += amount
        elif status in (InvoiceStatus.SENT, InvoiceStatus.OVERDUE):
            outstanding += amount

    return {"monthly_revenue": monthly_revenue, "outstanding": outstanding, "paid": paid}


class InvoiceRepository(TenantScopedRepository[Invoice]):
    model = Invoice
    not_found_message = "Facture introuvable."
    default_order = (Invoice.issue_date.desc(), Invoice.created_at.desc())

    def __init__(self, session, numbering: Optional[InvoiceNumberGenerator] = None):
        super().__init__(session)
        self.numbering = numbering or TimestampInvoiceNumbering()

    def _filtered(
        self,
        ctx: TenantContext,
        status: Optional[InvoiceStatus] = None,
        search: Optional[str] = None,
    ):
        query = self._scoped(ctx)
        if status is not None:
            query = query.where(Invoice.status == status)
        term = (search or "").strip()
        if term:
            query = query.where(Invoice.invoice_number.ilike(f"%{term}%"))
        return query

    async def _ensure_client(self, ctx: TenantContext, client_id: uuid.UUID) -> None:
        client = await ClientRepository(self.session).find(ctx, client_id)
        if client is None:
            raise ValidationError(UNKNOWN_CLIENT_MESSAGE)

    async def create(self, ctx: TenantContext, values: Mapping[str, Any]) -> Invoice:
        values = dict(values)
        await self._ensure_client(ctx, values["client_id"])

        items = list(values.get("items") or [])
        totals = compute_totals(items)
        values.update(
            items=items,
            subtotal_amount=totals.subtotal,
            total_amount=totals.total,
            invoice_number=await self.numbering.next_number(self.session, ctx.tenant_id),
        )
        invoice = await super().create(ctx, values)
        await self.session.refresh(invoice, attribute_names=["client"])
        return invoice

    async def update(self, ctx: TenantContext, record_id: uuid.UUID, values: Mapping[str, Any]) -> Invoice:
        values = dict(values)
        if "client_id" in values:
            await self._ensure_client(ctx, values["client_id"])

        if "items" in values:
            items = list(values["items"] or [])
            totals = compute_totals(items)
            values.update(items=items, subtotal_amount=totals.subtotal, total_amount=totals.total)

        invoice = await super().update(ctx, record_id, values)
        await self.session.refresh(invoice, attribute_names=["client"])
        return invoice

    async def summary(self, ctx: TenantContext, today: Optional[date] = None) -> Dict[str, Any]:
        result = await self.session.exec(
            select(Invoice.status, Invoice.issue_date, Invoice.total_amount).where(
                Invoice.tenant_id == ctx.tenant_id
            )
        )
        return summarize(list(result.all()), today or date.today())

    async def issued_between(self, ctx: TenantContext, start: date, end: date) -> List[Invoice]:
        result = await self.session.exec(
            self._scoped(ctx)
            .where(Invoice.issue_date >= start, Invoice.issue_date <= end)
            .order_by(Invoice.issue_date.asc())
        )
        return list(result.all())

    async def todo(self, ctx: TenantContext, today: Optional[date] = None) -> Dict[str, List[Invoice]]:
        today = today or date.today()
        soon = today + timedelta(days=DUE_SOON_DAYS)
        by_due_date = (Invoice.due_date.asc(), Invoice.issue_date.asc())

        overdue = await self.session.exec(
            self._scoped(ctx)
            .where(
                or_(
                    Invoice.status == InvoiceStatus.OVERDUE,
                    and_(Invoice.status == InvoiceStatus.SENT, Invoice.due_date < today),
                )
            )
            .order_by(*by_due_date)
            .limit(TODO_LIMIT)
        )
        due_soon = await self.session.exec(
            self._scoped(ctx)
            .where(
                Invoice.status == InvoiceStatus.SENT,
                Invoice.due_date >= today,
                Invoice.due_date <= soon,
            )
            .order_by(*by_due_date)
            .limit(TODO_LIMIT)
        )
        drafts = await self.session.exec(
            self._scoped(ctx)
            .where(Invoice.status == InvoiceStatus.DRAFT)
            .order_by(Invoice.created_at.desc())
            .limit(TODO_LIMIT)
        )
        return {
            "overdue": list(overdue.all()),
            "due_soon": list(due_soon.all()),
            "drafts": list(drafts.all()),
        }
