"""
Catalog item model for reusable products and services
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid

from kadi.models.timestamps import TIMESTAMP, utcnow


class CatalogItemType(str, Enum):
    """Type of catalog item"""
    PRODUCT = "product"
    SERVICE = "service"


class CatalogItem(SQLModel, table=True):
    """Sellable product or service template with a default price"""

    __tablename__ = "catalog_items"
    __table_args__ = (
        UniqueConstraint("tenant_id", "sku", name="catalog_items_tenant_sku_key"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    tenant_id: uuid.UUID = Field(
        foreign_key="tenants.id",
        index=True,
        description="Tenant ID for multi-tenant isolation"
    )

    # Item details
    name: str = Field(max_length=255, nullable=False, description="Item name")
    description: Optional[str] = Field(default=None, max_length=2000)
    item_type: CatalogItemType = Field(
        default=CatalogItemType.PRODUCT,
        index=True,
        description="Product or service"
    )

    # Pricing
    unit_price: float = Field(default=0, description="Default unit price")
    currency: str = Field(default="USD", max_length=10)

    # Identification, unique per tenant when present
    sku: Optional[str] = Field(default=None, max_length=100)

    # Availability
    is_active: bool = Field(default=True, index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP, index=True)
    updated_at: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP)
