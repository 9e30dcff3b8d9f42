"""
Catalog (products and services) API endpoints
"""

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import Any, Dict, Optional
import uuid

from kadi.core.config import Settings, get_settings
from kadi.core.database import get_session
from kadi.core.dependencies import get_tenant_context
from kadi.core.errors import ValidationError
from kadi.core.tenancy import TenantContext
from kadi.models.catalog_item import CatalogItemType
from kadi.repositories.catalog import CatalogItemRepository
from kadi.schemas.catalog import CatalogItemPage, CatalogItemRead
from kadi.services.catalog import ITEM_TYPES, sanitize_payload
from kadi.services.pagination import build_pagination_meta, get_pagination_params

router = APIRouter()

_ACTIVE_FILTERS = {"true": True, "1": True, "false": False, "0": False}


def _type_filter(value: Optional[str]) -> Optional[CatalogItemType]:
    value = (value or "").strip().lower()
    return CatalogItemType(value) if value in ITEM_TYPES else None


def _active_filter(value: Optional[str]) -> Optional[bool]:
    return _ACTIVE_FILTERS.get((value or "").strip().lower())


@router.get("", response_model=CatalogItemPage)
async def list_products(
    search: Optional[str] = Query(None, description="Search name, description or SKU"),
    item_type: Optional[str] = Query(None, alias="type"),
    active: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    """List catalog items; unknown type or active values are ignored"""
    pagination = get_pagination_params(
        page,
        page_size,
        default_page_size=settings.DEFAULT_PAGE_SIZE,
        max_page_size=settings.MAX_PAGE_SIZE,
    )
    rows, total = await CatalogItemRepository(session).list(
        ctx,
        pagination,
        search=search,
        item_type=_type_filter(item_type),
        is_active=_active_filter(active),
    )
    return CatalogItemPage(
        data=[CatalogItemRead.model_validate(row) for row in rows],
        pagination=build_pagination_meta(total, pagination.page, pagination.page_size),
    )


@router.get("/{item_id}", response_model=CatalogItemRead)
async def get_product(
    item_id: uuid.UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    return await CatalogItemRepository(session).get(ctx, item_id)


@router.post("", response_model=CatalogItemRead, status_code=status.HTTP_201_CREATED)
async def create_product(
    payload: Dict[str, Any] = Body(...),
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """Create a catalog item from the allow-listed fields of the body"""
    values = sanitize_payload(payload, ensure_type=True)
    if not values.get("name"):
        raise ValidationError("Le nom est requis.")
    return await CatalogItemRepository(session).create(ctx, values)


@router.patch("/{item_id}", response_model=CatalogItemRead)
async def update_product(
    item_id: uuid.UUID,
    payload: Dict[str, Any] = Body(...),
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    values = sanitize_payload(payload)
    if not values:
        raise ValidationError("Aucune modification fournie.")
    if "name" in values and not values["name"]:
        raise ValidationError("Le nom est requis.")
    return await CatalogItemRepository(session).update(ctx, item_id, values)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    item_id: uuid.UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    await CatalogItemRepository(session).delete(ctx, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
