"""
Pydantic schemas for catalog items
"""

from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
import uuid

from kadi.models.catalog_item import CatalogItemType
from kadi.schemas.common import PaginationMeta


class CatalogItemRead(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    name: str
    description: Optional[str] = None
    item_type: CatalogItemType
    unit_price: float
    currency: str
    sku: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CatalogItemPage(BaseModel):
    data: List[CatalogItemRead]
    pagination: PaginationMeta
