"""
Tenant-scoped data access
"""

from typing import Any, Generic, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar
import uuid

from sqlalchemy import func
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
import structlog

from kadi.core.errors import NotFound
from kadi.core.tenancy import TenantContext
from kadi.models.timestamps import utcnow
from kadi.services.pagination import PaginationParams

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class TenantScopedRepository(Generic[ModelT]):
    """Base repository: every operation takes the caller's TenantContext first.

    Queries are built from ``_scoped(ctx)`` so the tenant predicate cannot be
    left out.
    """

    model: Type[ModelT]
    not_found_message = "Ressource introuvable."
    default_order: Sequence[Any] = ()

    def __init__(self, session: AsyncSession):
        self.session = session

    def _scoped(self, ctx: TenantContext):
        return select(self.model).where(self.model.tenant_id == ctx.tenant_id)

    def _filtered(self, ctx: TenantContext, **filters):
        """Hook for subclasses to add search and filter predicates"""
        return self._scoped(ctx)

    async def _paginate(self, query, pagination: PaginationParams) -> Tuple[List[ModelT], int]:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
        total = (await self.session.exec(count_query)).one()
        rows = await self.session.exec(
            query.order_by(*self.default_order)
            .offset(pagination.offset_start)
            .limit(pagination.limit)
        )
        return list(rows.all()), int(total)

    async def list(self, ctx: TenantContext, pagination: PaginationParams, **filters) -> Tuple[List[ModelT], int]:
        return await self._paginate(self._filtered(ctx, **filters), pagination)

    async def find(self, ctx: TenantContext, record_id: uuid.UUID) -> Optional[ModelT]:
        result = await self.session.exec(self._scoped(ctx).where(self.model.id == record_id))
        return result.first()

    async def get(self, ctx: TenantContext, record_id: uuid.UUID) -> ModelT:
        record = await self.find(ctx, record_id)
        if record is None:
            raise NotFound(self.not_found_message)
        return record

    async def create(self, ctx: TenantContext, values: Mapping[str, Any]) -> ModelT:
        record = self.model(**{**values, "tenant_id": ctx.tenant_id})
        self.session.add(record)
        await self.session.commit()
        await self.session.refresh(record)
        logger.info("record_created", table=self.model.__tablename__, id=str(record.id), tenant_id=str(ctx.tenant_id))
        return record

    async def update(self, ctx: TenantContext, record_id: uuid.UUID, values: Mapping[str, Any]) -> ModelT:
        record = await self.get(ctx, record_id)
        for key, value in values.items():
            if key in ("id", "tenant_id"):
                continue
            setattr(record, key, value)
        if "updated_at" not in values and hasattr(record, "updated_at"):
            record.updated_at = utcnow()
        self.session.add(record)
        await self.session.commit()
        await self.session.refresh(record)
        logger.info("record_updated", table=self.model.__tablename__, id=str(record_id), tenant_id=str(ctx.tenant_id))
        return record

    async def delete(self, ctx: TenantContext, record_id: uuid.UUID) -> None:
        record = await self.get(ctx, record_id)
        await self.session.delete(record)
        await self.session.commit()
        logger.info("record_deleted", table=self.model.__tablename__, id=str(record_id), tenant_id=str(ctx.tenant_id))
