"""
Catalog item data access
"""

from typing import Optional

from sqlalchemy import or_

from kadi.core.tenancy import TenantContext
from kadi.models.catalog_item import CatalogItem, CatalogItemType
from kadi.repositories.base import TenantScopedRepository


class CatalogItemRepository(TenantScopedRepository[CatalogItem]):
    model = CatalogItem
    not_found_message = "Élément du catalogue introuvable."
    default_order = (CatalogItem.created_at.desc(),)

    def _filtered(
        self,
        ctx: TenantContext,
        search: Optional[str] = None,
        item_type: Optional[CatalogItemType] = None,
        is_active: Optional[bool] = None,
    ):
        query = self._scoped(ctx)

        if item_type is not None:
            query = query.where(CatalogItem.item_type == item_type)

        if is_active is not None:
            query = query.where(CatalogItem.is_active == is_active)

        term = (search or "").strip()
        if term:
            pattern = f"%{term}%"
            query = query.where(
                or_(
                    CatalogItem.name.ilike(pattern),
                    CatalogItem.description.ilike(pattern),
                    CatalogItem.sku.ilike(pattern),
                )
            )
        return query
