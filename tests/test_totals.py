"""
Tests for invoice total computation
"""

from kadi.schemas.invoice import LineItem
from kadi.services.totals import compute_totals, to_number


def test_sum_of_quantity_times_unit_price():
    totals = compute_totals([
        {"description": "Audit", "quantity": 2, "unitPrice": 5},
        {"description": "Conseil", "quantity": 1, "unitPrice": 40},
    ])
    assert totals.subtotal == 50
    assert totals.total == 50


def test_string_numbers_are_coerced():
    totals = compute_totals([{"quantity": "2", "unitPrice": "5.5"}])
    assert totals.total == 11


def test_unusable_values_count_as_zero():
    totals = compute_totals([
        {"quantity": "abc", "unitPrice": 10},
        {"quantity": 3},
        {"quantity": float("inf"), "unitPrice": 2},
    ])
    assert totals.subtotal == 0
    assert totals.total == 0


def test_empty_or_missing_items():
    assert compute_totals([]).total == 0
    assert compute_totals(None).total == 0


def test_snake_case_unit_price_and_objects():
    assert compute_totals([{"quantity": 4, "unit_price": 2.5}]).total == 10
    assert compute_totals([LineItem(quantity=3, unitPrice=3)]).total == 9


def test_to_number():
    assert to_number("  7 ") == 7
    assert to_number("") == 0
    assert to_number(None) == 0
    assert to_number(float("nan")) == 0
    assert to_number([1]) == 0
