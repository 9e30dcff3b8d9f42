"""
Offset pagination helpers
"""

import math
import re
from dataclasses import dataclass
from typing import Any, Optional

from kadi.schemas.common import PaginationMeta

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class PaginationParams:
    page: int
    page_size: int
    offset_start: int
    offset_end: int

    @property
    def limit(self) -> int:
        return self.page_size


def _parse_positive_int(raw: Any) -> Optional[int]:
    """Read the leading integer of a query value, None unless it is positive"""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, float):
        if not math.isfinite(raw):
            return None
        value = int(raw)
    else:
        match = _LEADING_INT.match(str(raw))
        if not match:
            return None
        value = int(match.group(1))
    return value if value > 0 else None


def get_pagination_params(
    page: Any = None,
    page_size: Any = None,
    *,
    default_page_size: int = 10,
    max_page_size: int = 100,
) -> PaginationParams:
    """Turn raw page/pageSize query values into an inclusive offset range"""
    resolved_page = _parse_positive_int(page) or 1
    resolved_size = _parse_positive_int(page_size) or default_page_size
    resolved_size = min(resolved_size, max_page_size)

    offset_start = (resolved_page - 1) * resolved_size
    offset_end = offset_start + resolved_size - 1
    return PaginationParams(
        page=resolved_page,
        page_size=resolved_size,
        offset_start=offset_start,
        offset_end=offset_end,
    )


def build_pagination_meta(total: Any = 0, page: int = 1, page_size: int = 10) -> PaginationMeta:
    """Describe the page actually served for a given row count"""
    count = total if isinstance(total, int) and not isinstance(total, bool) and total >= 0 else 0
    total_pages = max(math.ceil(count / page_size), 1) if count > 0 else 1
    safe_page = min(max(page, 1), total_pages)
    return PaginationMeta(page=safe_page, page_size=page_size, total=count, total_pages=total_pages)
