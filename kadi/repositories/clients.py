"""
Client data access
"""

from typing import Optional

from sqlalchemy import or_

from kadi.core.tenancy import TenantContext
from kadi.models.client import Client
from kadi.repositories.base import TenantScopedRepository


class ClientRepository(TenantScopedRepository[Client]):
    model = Client
    not_found_message = "Client introuvable."
    default_order = (Client.created_at.desc(),)

    def _filtered(self, ctx: TenantContext, search: Optional[str] = None):
        query = self._scoped(ctx)
        term = (search or "").strip()
        if term:
            pattern = f"%{term}%"
            query = query.where(
                or_(
                    Client.company_name.ilike(pattern),
                    Client.contact_name.ilike(pattern),
                    Client.email.ilike(pattern),
                    Client.phone.ilike(pattern),
                )
            )
        return query
