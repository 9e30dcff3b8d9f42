"""
Invoice total computation
"""

import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: float
    total: float


def to_number(value: Any) -> float:
    """Coerce a form value to a finite float; anything unusable becomes 0"""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip()) if value.strip() else 0.0
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _field(item: Any, *names: str) -> Any:
    for name in names:
        if isinstance(item, Mapping):
            if name in item:
                return item[name]
        elif hasattr(item, name):
            return getattr(item, name)
    return None


def compute_totals(items: Iterable[Any]) -> InvoiceTotals:
    """Sum quantity x unit price over the line items.

    There is no tax or discount model, so the total always equals the subtotal.
    """
    subtotal = 0.0
    for item in items or ():
        quantity = to_number(_field(item, "quantity"))
        unit_price = to_number(_field(item, "unitPrice", "unit_price"))
        subtotal += quantity * unit_price
    return InvoiceTotals(subtotal=subtotal, total=subtotal)
