"""
Tests for period analytics
"""

from datetime import date, datetime, timezone
import uuid

import pytest

from kadi.core.errors import ValidationError
from kadi.models.client import Client
from kadi.models.invoice import Invoice, InvoiceStatus
from kadi.services.analytics import build_analytics, default_range, resolve_range

TODAY = date(2026, 3, 15)
TENANT = uuid.uuid4()


def make_invoice(issue_date, status, amount, company="Soleil SARL", paid_on=None, items=None):
    customer = Client(tenant_id=TENANT, company_name=company)
    return Invoice(
        tenant_id=TENANT,
        client_id=customer.id,
        client=customer,
        invoice_number="FAC-000001",
        issue_date=issue_date,
        status=status,
        total_amount=amount,
        items=items or [],
        updated_at=datetime(paid_on.year, paid_on.month, paid_on.day, tzinfo=timezone.utc) if paid_on else None,
    )


def test_default_ranges_end_today():
    assert default_range("day", TODAY) == (date(2026, 2, 14), TODAY)
    assert default_range("month", TODAY) == (date(2025, 4, 1), TODAY)
    assert default_range("year", TODAY) == (date(2022, 1, 1), TODAY)


def test_resolve_range_fills_missing_bounds():
    assert resolve_range(None, today=TODAY) == ("month", date(2025, 4, 1), TODAY)
    assert resolve_range(" DAY ", start="2026-03-01", today=TODAY) == ("day", date(2026, 3, 1), TODAY)
    assert resolve_range("year", end="2026-01-31T00:00:00Z", today=TODAY)[2] == date(2026, 1, 31)


@pytest.mark.parametrize(
    "period, start, end",
    [("week", None, None), ("day", "2026-13-01", None), ("month", "2026-03-02", "2026-03-01")],
)
def test_resolve_range_rejects_bad_input(period, start, end):
    with pytest.raises(ValidationError):
        resolve_range(period, start, end, today=TODAY)


def test_daily_series_and_payment_delay():
    invoices = [
        make_invoice(date(2026, 3, 1), InvoiceStatus.PAID, 100, paid_on=date(2026, 3, 11)),
        make_invoice(date(2026, 3, 3), InvoiceStatus.PAID, 50, company="Lune", paid_on=date(2026, 3, 5)),
        make_invoice(date(2026, 3, 3), InvoiceStatus.OVERDUE, 70),
        make_invoice(date(2026, 3, 2), InvoiceStatus.DRAFT, 10),
    ]
    result = build_analytics(invoices, "day", date(2026, 3, 1), date(2026, 3, 3))

    assert result["totals"] == {
        "revenue": 150,
        "outstanding": 70,
        "invoice_count": 4,
        "average_payment_delay": 6.0,
    }
    assert result["charts"]["revenue"] == [
        {"label": "2026-03-01", "total": 100},
        {"label": "2026-03-02", "total": 0},
        {"label": "2026-03-03", "total": 50},
    ]
    assert result["charts"]["top_clients"] == [
        {"company": "Soleil SARL", "total": 100},
        {"company": "Lune", "total": 50},
    ]


def test_rankings_are_capped_and_skip_unnamed_lines():
    items = [{"description": f"Article {index}", "quantity": 1, "unitPrice": index} for index in range(1, 8)]
    items.append({"description": "  ", "quantity": 1, "unitPrice": 1000})
    invoices = [make_invoice(date(2026, 1, 5), InvoiceStatus.PAID, 1028, items=items)]

    result = build_analytics(invoices, "year", date(2025, 6, 1), date(2026, 12, 31))
    assert [point["label"] for point in result["charts"]["revenue"]] == ["2025", "2026"]
    assert [point["label"] for point in result["charts"]["top_products"]] == [
        "Article 7",
        "Article 6",
        "Article 5",
        "Article 4",
        "Article 3",
    ]
    assert result["meta"] == {"period": "year", "start_date": date(2025, 6, 1), "end_date": date(2026, 12, 31)}


def test_invoices_outside_the_range_are_ignored():
    invoices = [make_invoice(date(2025, 12, 31), InvoiceStatus.PAID, 500)]
    result = build_analytics(invoices, "month", date(2026, 1, 1), date(2026, 2, 28))
    assert result["totals"]["invoice_count"] == 0
    assert result["charts"]["revenue"] == [
        {"label": "2026-01", "total": 0},
        {"label": "2026-02", "total": 0},
    ]
