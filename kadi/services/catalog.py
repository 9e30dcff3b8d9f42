"""
Catalog payload sanitization
"""

import math
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from kadi.models.catalog_item import CatalogItemType
from kadi.models.timestamps import utcnow

CATALOG_FIELDS = (
    "name",
    "description",
    "item_type",
    "unit_price",
    "currency",
    "sku",
    "is_active",
)

ITEM_TYPES = {item_type.value for item_type in CatalogItemType}

_FALSE_STRINGS = {"", "false", "0", "no", "off", "non"}


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def _to_price(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip()


def sanitize_payload(
    payload: Optional[Mapping[str, Any]],
    *,
    ensure_type: bool = False,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Narrow an arbitrary request body to the catalog allow-list.

    ``ensure_type`` is set on create: a missing or unknown ``item_type``
    becomes ``product``. On update an unknown type is dropped so the stored
    value is left alone. The result carries ``updated_at`` whenever at least
    one field survived.
    """
    if not isinstance(payload, Mapping):
        payload = {}

    sanitized: Dict[str, Any] = {}

    if "name" in payload:
        sanitized["name"] = _text(payload["name"]) or ""

    if "description" in payload:
        sanitized["description"] = _text(payload["description"])

    raw_type = payload.get("item_type")
    item_type = str(raw_type).strip().lower() if raw_type is not None else None
    if item_type in ITEM_TYPES:
        sanitized["item_type"] = CatalogItemType(item_type)
    elif ensure_type:
        sanitized["item_type"] = CatalogItemType.PRODUCT

    if "unit_price" in payload:
        sanitized["unit_price"] = _to_price(payload["unit_price"])

    if "currency" in payload and payload["currency"] is not None:
        currency = str(payload["currency"]).strip().upper()
        if currency:
            sanitized["currency"] = currency

    if "sku" in payload:
        sanitized["sku"] = _text(payload["sku"]) or None

    if "is_active" in payload:
        sanitized["is_active"] = _to_bool(payload["is_active"])

    if sanitized:
        sanitized["updated_at"] = now or utcnow()

    return sanitized
