"""
Invoice API endpoints
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import Optional
import uuid

from kadi.core.config import Settings, get_settings
from kadi.core.database import get_session
from kadi.core.dependencies import get_tenant_context
from kadi.core.errors import ValidationError
from kadi.core.tenancy import TenantContext
from kadi.models.invoice import InvoiceStatus
from kadi.repositories.invoices import InvoiceRepository
from kadi.schemas.invoice import (
    InvoiceAnalytics,
    InvoiceCreate,
    InvoicePage,
    InvoiceRead,
    InvoiceSummary,
    InvoiceTodo,
    InvoiceUpdate,
)
from kadi.services.analytics import build_analytics, resolve_range
from kadi.services.numbering import get_numbering_strategy
from kadi.services.pagination import build_pagination_meta, get_pagination_params
from kadi.services.pdf import render_invoice_pdf

router = APIRouter()


def get_invoice_repository(
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> InvoiceRepository:
    return InvoiceRepository(session, numbering=get_numbering_strategy(settings.INVOICE_NUMBERING))


def _status_filter(value: Optional[str]) -> Optional[InvoiceStatus]:
    value = (value or "").strip().lower()
    try:
        return InvoiceStatus(value) if value else None
    except ValueError:
        return None


@router.get("", response_model=InvoicePage)
async def list_invoices(
    search: Optional[str] = Query(None, description="Search by invoice number"),
    invoice_status: Optional[str] = Query(None, alias="status"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    ctx: TenantContext = Depends(get_tenant_context),
    repository: InvoiceRepository = Depends(get_invoice_repository),
    settings: Settings = Depends(get_settings),
):
    """List invoices with their client, most recent issue date first"""
    pagination = get_pagination_params(
        page,
        page_size,
        default_page_size=settings.DEFAULT_PAGE_SIZE,
        max_page_size=settings.MAX_PAGE_SIZE,
    )
    rows, total = await repository.list(
        ctx, pagination, status=_status_filter(invoice_status), search=search
    )
    return InvoicePage(
        data=[InvoiceRead.model_validate(row) for row in rows],
        pagination=build_pagination_meta(total, pagination.page, pagination.page_size),
    )


@router.get("/summary", response_model=InvoiceSummary, response_model_by_alias=True)
async def invoice_summary(
    ctx: TenantContext = Depends(get_tenant_context),
    repository: InvoiceRepository = Depends(get_invoice_repository),
):
    """Dashboard figures: revenue paid this month, outstanding amount, paid count"""
    return InvoiceSummary(**await repository.summary(ctx))


@router.get("/analytics", response_model=InvoiceAnalytics, response_model_by_alias=True)
async def invoice_analytics(
    period: Optional[str] = Query("month", description="Bucket size: day, month or year"),
    start: Optional[str] = Query(None, description="First issue date included (YYYY-MM-DD)"),
    end: Optional[str] = Query(None, description="Last issue date included (YYYY-MM-DD)"),
    ctx: TenantContext = Depends(get_tenant_context),
    repository: InvoiceRepository = Depends(get_invoice_repository),
):
    """Revenue, outstanding amount and rankings over a period, for the dashboard charts"""
    period, range_start, range_end = resolve_range(period, start, end)
    invoices = await repository.issued_between(ctx, range_start, range_end)
    return InvoiceAnalytics(**build_analytics(invoices, period, range_start, range_end))


@router.get("/todo", response_model=InvoiceTodo, response_model_by_alias=True)
async def invoice_todo(
    ctx: TenantContext = Depends(get_tenant_context),
    repository: InvoiceRepository = Depends(get_invoice_repository),
):
    """Overdue, due-soon and draft invoices needing attention"""
    lists = await repository.todo(ctx)
    return InvoiceTodo(
        **{
            key: [InvoiceRead.model_validate(row) for row in rows]
            for key, rows in lists.items()
        }
    )


@router.get("/pdf/{invoice_id}")
async def invoice_pdf(
    invoice_id: uuid.UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    repository: InvoiceRepository = Depends(get_invoice_repository),
):
    invoice = await repository.get(ctx, invoice_id)
    content = render_invoice_pdf(
        invoice,
        invoice.client,
        company_name=ctx.company_name,
        tagline=ctx.tagline,
    )
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=facture-{invoice.invoice_number}.pdf"},
    )


@router.get("/{invoice_id}", response_model=InvoiceRead)
async def get_invoice(
    invoice_id: uuid.UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    repository: InvoiceRepository = Depends(get_invoice_repository),
):
    return await repository.get(ctx, invoice_id)


@router.post("", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def create_invoice(
    invoice_data: InvoiceCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    repository: InvoiceRepository = Depends(get_invoice_repository),
):
    """Create an invoice; number and totals are computed server-side"""
    values = invoice_data.model_dump(exclude={"items"})
    values["currency"] = values.get("currency") or "USD"
    values["items"] = [item.as_stored() for item in invoice_data.items]
    return await repository.create(ctx, values)


@router.patch("/{invoice_id}", response_model=InvoiceRead)
async def update_invoice(
    invoice_id: uuid.UUID,
    invoice_data: InvoiceUpdate,
    ctx: TenantContext = Depends(get_tenant_context),
    repository: InvoiceRepository = Depends(get_invoice_repository),
):
    """Update an invoice; totals are recomputed only when items are replaced"""
    changes = invoice_data.model_dump(exclude_unset=True, exclude={"items"})
    if "items" in invoice_data.model_fields_set:
        changes["items"] = [item.as_stored() for item in invoice_data.items]
    if "currency" in changes and not changes["currency"]:
        del changes["currency"]
    if not changes:
        raise ValidationError("Aucune modification fournie.")
    return await repository.update(ctx, invoice_id, changes)


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: uuid.UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    repository: InvoiceRepository = Depends(get_invoice_repository),
):
    await repository.delete(ctx, invoice_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
