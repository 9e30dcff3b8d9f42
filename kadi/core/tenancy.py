"""
Tenant context attached to every scoped request
"""

from dataclasses import dataclass
from typing import Optional
import uuid

from kadi.models.profile import Profile


@dataclass(frozen=True)
class TenantContext:
    """Resolved caller identity and the tenant every query is scoped to"""
    principal_id: uuid.UUID
    tenant_id: uuid.UUID
    email: str
    profile: Optional[Profile] = None

    @property
    def company_name(self) -> Optional[str]:
        return self.profile.company if self.profile else None

    @property
    def tagline(self) -> Optional[str]:
        return self.profile.tagline if self.profile else None
