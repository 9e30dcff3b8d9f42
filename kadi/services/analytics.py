"""
Period analytics for the dashboard: totals, revenue series and top rankings
"""

from collections import defaultdict
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from kadi.core.errors import ValidationError
from kadi.models.invoice import Invoice, InvoiceStatus
from kadi.services.totals import compute_totals

PERIODS = ("day", "month", "year")
DEFAULT_PERIOD = "month"
TOP_LIMIT = 5

# Buckets shown when no explicit range is requested
DEFAULT_SPAN = {"day": 30, "month": 12, "year": 5}

INVALID_PERIOD_MESSAGE = "Période invalide. Utilisez day, month ou year."
INVALID_DATE_MESSAGE = "Date invalide. Utilisez le format AAAA-MM-JJ."
INVERTED_RANGE_MESSAGE = "La date de fin doit être postérieure à la date de début."
UNKNOWN_CLIENT_LABEL = "Client inconnu"


def _shift_months(day: date, months: int) -> date:
    index = day.year * 12 + day.month - 1 + months
    return date(index // 12, index % 12 + 1, 1)


def bucket_start(day: date, period: str) -> date:
    if period == "day":
        return day
    if period == "month":
        return day.replace(day=1)
    return date(day.year, 1, 1)


def next_bucket(start: date, period: str) -> date:
    if period == "day":
        return start + timedelta(days=1)
    if period == "month":
        return _shift_months(start, 1)
    return date(start.year + 1, 1, 1)


def bucket_label(start: date, period: str) -> str:
    if period == "day":
        return start.isoformat()
    if period == "month":
        return start.strftime("%Y-%m")
    return str(start.year)


def default_range(period: str, today: date) -> Tuple[date, date]:
    span = DEFAULT_SPAN[period]
    if period == "day":
        return today - timedelta(days=span - 1), today
    if period == "month":
        return _shift_months(today, -(span - 1)), today
    return date(today.year - span + 1, 1, 1), today


def _parse_date(value: Optional[str]) -> Optional[date]:
    value = (value or "").strip()
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        raise ValidationError(INVALID_DATE_MESSAGE) from None


def resolve_range(
    period: Optional[str],
    start: Optional[str] = None,
    end: Optional[str] = None,
    today: Optional[date] = None,
) -> Tuple[str, date, date]:
    """Validate the period and fill whichever range bound is missing"""
    period = (period or DEFAULT_PERIOD).strip().lower()
    if period not in PERIODS:
        raise ValidationError(INVALID_PERIOD_MESSAGE)

    default_start, default_end = default_range(period, today or date.today())
    range_start = _parse_date(start) or default_start
    range_end = _parse_date(end) or default_end
    if range_start > range_end:
        raise ValidationError(INVERTED_RANGE_MESSAGE)
    return period, range_start, range_end


def _ranked(totals: Dict[str, float], key: str) -> List[Dict[str, Any]]:
    ordered = sorted(totals.items(), key=lambda entry: (-entry[1], entry[0]))
    return [{key: label, "total": total} for label, total in ordered[:TOP_LIMIT]]


def build_analytics(
    invoices: Iterable[Invoice],
    period: str,
    start: date,
    end: date,
) -> Dict[str, Any]:
    """Aggregate the invoices issued between start and end, both inclusive.

    Revenue, the revenue series and both rankings count paid invoices only.
    The payment delay is measured from the issue date to the last update of a
    paid invoice, which is when it was marked paid.
    """
    series: Dict[str, float] = {}
    cursor = bucket_start(start, period)
    while cursor <= end:
        series[bucket_label(cursor, period)] = 0.0
        cursor = next_bucket(cursor, period)

    revenue = 0.0
    outstanding = 0.0
    count = 0
    delays: List[int] = []
    by_client: Dict[str, float] = defaultdict(float)
    by_product: Dict[str, float] = defaultdict(float)

    for invoice in invoices:
        if invoice.issue_date is None or not start <= invoice.issue_date <= end:
            continue
        count += 1
        amount = float(invoice.total_amount or 0)

        if invoice.status in (InvoiceStatus.SENT, InvoiceStatus.OVERDUE):
            outstanding += amount
        if invoice.status != InvoiceStatus.PAID:
            continue

        revenue += amount
        series[bucket_label(bucket_start(invoice.issue_date, period), period)] += amount
        company = invoice.client.company_name if invoice.client is not None else None
        by_client[company or UNKNOWN_CLIENT_LABEL] += amount
        for item in invoice.items or ():
            label = str(item.get("description") or "").strip()
            if label:
                by_product[label] += compute_totals([item]).total
        if invoice.updated_at is not None:
            delays.append(max((invoice.updated_at.date() - invoice.issue_date).days, 0))

    return {
        "totals": {
            "revenue": revenue,
            "outstanding": outstanding,
            "invoice_count": count,
            "average_payment_delay": round(sum(delays) / len(delays), 1) if delays else 0.0,
        },
        "charts": {
            "revenue": [{"label": label, "total": total} for label, total in series.items()],
            "top_clients": _ranked(by_client, "company"),
            "top_products": _ranked(by_product, "label"),
        },
        "meta": {"period": period, "start_date": start, "end_date": end},
    }
