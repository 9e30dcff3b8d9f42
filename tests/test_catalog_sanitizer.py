"""
Tests for catalog payload sanitization
"""

from datetime import datetime, timezone

from kadi.models.catalog_item import CatalogItemType
from kadi.services.catalog import sanitize_payload

NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def test_unknown_fields_are_dropped():
    result = sanitize_payload({"name": "Stylo", "tenant_id": "x", "id": "y", "price": 3}, now=NOW)
    assert result == {"name": "Stylo", "updated_at": NOW}


def test_create_defaults_type_to_product():
    result = sanitize_payload({"name": "Stylo"}, ensure_type=True, now=NOW)
    assert result["item_type"] == CatalogItemType.PRODUCT

    result = sanitize_payload({"name": "Stylo", "item_type": "gadget"}, ensure_type=True, now=NOW)
    assert result["item_type"] == CatalogItemType.PRODUCT


def test_default_timestamp_is_utc_aware():
    result = sanitize_payload({"name": "Stylo"})
    assert result["updated_at"].tzinfo is not None
    assert result["updated_at"].utcoffset().total_seconds() == 0


def test_update_drops_unknown_type():
    result = sanitize_payload({"item_type": "gadget"}, now=NOW)
    assert result == {}

    result = sanitize_payload({"item_type": "Service"}, now=NOW)
    assert result["item_type"] == CatalogItemType.SERVICE


def test_values_are_normalized():
    result = sanitize_payload(
        {
            "name": "  Stylo  ",
            "unit_price": "12.5",
            "currency": " eur ",
            "sku": "   ",
            "is_active": "false",
        },
        now=NOW,
    )
    assert result["name"] == "Stylo"
    assert result["unit_price"] == 12.5
    assert result["currency"] == "EUR"
    assert result["sku"] is None
    assert result["is_active"] is False
    assert result["updated_at"] == NOW


def test_bad_price_becomes_zero():
    assert sanitize_payload({"unit_price": "abc"}, now=NOW)["unit_price"] == 0
    assert sanitize_payload({"unit_price": None}, now=NOW)["unit_price"] == 0


def test_empty_or_non_mapping_payload():
    assert sanitize_payload({}) == {}
    assert sanitize_payload(None) == {}
    assert sanitize_payload(["name"]) == {}


def test_truthy_values_for_is_active():
    assert sanitize_payload({"is_active": "true"}, now=NOW)["is_active"] is True
    assert sanitize_payload({"is_active": 1}, now=NOW)["is_active"] is True
    assert sanitize_payload({"is_active": "0"}, now=NOW)["is_active"] is False
