"""
Tests for invoice numbering and dashboard aggregation
"""

from datetime import date

import pytest

from kadi.core.tenancy import TenantContext
from kadi.models.client import Client
from kadi.models.invoice import InvoiceStatus
from kadi.repositories.invoices import InvoiceRepository, summarize
from kadi.services.numbering import (
    SequentialInvoiceNumbering,
    TimestampInvoiceNumbering,
    get_numbering_strategy,
)


@pytest.mark.asyncio
async def test_timestamp_numbering_uses_last_six_digits():
    numbering = TimestampInvoiceNumbering(clock=lambda: 1700000123.5)
    assert await numbering.next_number(None, None) == "FAC-123500"


def test_numbering_strategy_lookup():
    assert isinstance(get_numbering_strategy("timestamp"), TimestampInvoiceNumbering)
    assert isinstance(get_numbering_strategy("SEQUENCE"), SequentialInvoiceNumbering)
    with pytest.raises(ValueError):
        get_numbering_strategy("random")


@pytest.mark.asyncio
async def test_sequential_numbering_is_per_tenant(session_factory, account, other_account):
    ctx = TenantContext(
        principal_id=account.user.id, tenant_id=account.profile.tenant_id, email=account.user.email
    )
    other_ctx = TenantContext(
        principal_id=other_account.user.id,
        tenant_id=other_account.profile.tenant_id,
        email=other_account.user.email,
    )

    async with session_factory() as session:
        customer = Client(tenant_id=ctx.tenant_id, company_name="Soleil")
        other_customer = Client(tenant_id=other_ctx.tenant_id, company_name="Lune")
        session.add(customer)
        session.add(other_customer)
        await session.commit()

        repository = InvoiceRepository(session, numbering=SequentialInvoiceNumbering())
        first = await repository.create(ctx, {"client_id": customer.id, "items": []})
        second = await repository.create(ctx, {"client_id": customer.id, "items": []})
        other = await repository.create(other_ctx, {"client_id": other_customer.id, "items": []})

    assert first.invoice_number == "FAC-000001"
    assert second.invoice_number == "FAC-000002"
    assert other.invoice_number == "FAC-000001"


def test_summarize_december_rollover():
    today = date(2025, 12, 20)
    rows = [
        (InvoiceStatus.PAID, date(2025, 12, 1), 40.0),
        (InvoiceStatus.PAID, date(2026, 1, 1), 99.0),
        (InvoiceStatus.OVERDUE, date(2025, 6, 1), 15.0),
        (InvoiceStatus.SENT, None, None),
        (InvoiceStatus.DRAFT, date(2025, 12, 2), 500.0),
    ]
    assert summarize(rows, today) == {"monthly_revenue": 40.0, "outstanding": 15.0, "paid": 2}
