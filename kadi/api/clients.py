"""
Client API endpoints
"""

from fastapi import APIRouter, Depends, Query, Response, status
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import Optional
import uuid

from kadi.core.config import Settings, get_settings
from kadi.core.database import get_session
from kadi.core.dependencies import get_tenant_context
from kadi.core.errors import ValidationError
from kadi.core.tenancy import TenantContext
from kadi.repositories.clients import ClientRepository
from kadi.schemas.client import ClientCreate, ClientPage, ClientRead, ClientUpdate
from kadi.services.pagination import build_pagination_meta, get_pagination_params

router = APIRouter()


@router.get("", response_model=ClientPage)
async def list_clients(
    search: Optional[str] = Query(None, description="Search company, contact, email or phone"),
    page: Optional[str] = Query(None),
    page_size: Optional[str] = Query(None, alias="pageSize"),
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    """List the tenant's clients, newest first"""
    pagination = get_pagination_params(
        page,
        page_size,
        default_page_size=settings.DEFAULT_PAGE_SIZE,
        max_page_size=settings.MAX_PAGE_SIZE,
    )
    rows, total = await ClientRepository(session).list(ctx, pagination, search=search)
    return ClientPage(
        data=[ClientRead.model_validate(row) for row in rows],
        pagination=build_pagination_meta(total, pagination.page, pagination.page_size),
    )


@router.get("/{client_id}", response_model=ClientRead)
async def get_client(
    client_id: uuid.UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """Get a specific client"""
    return await ClientRepository(session).get(ctx, client_id)


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client(
    client_data: ClientCreate,
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """Create a client for the caller's tenant"""
    return await ClientRepository(session).create(ctx, client_data.model_dump())


@router.patch("/{client_id}", response_model=ClientRead)
async def update_client(
    client_id: uuid.UUID,
    client_data: ClientUpdate,
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """Update the fields present in the request"""
    changes = client_data.model_dump(exclude_unset=True)
    if not changes:
        raise ValidationError("Aucune modification fournie.")
    return await ClientRepository(session).update(ctx, client_id, changes)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: uuid.UUID,
    ctx: TenantContext = Depends(get_tenant_context),
    session: AsyncSession = Depends(get_session),
):
    """Delete a client"""
    await ClientRepository(session).delete(ctx, client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
