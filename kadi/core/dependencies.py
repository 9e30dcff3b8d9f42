"""
Authentication and tenant resolution dependencies for FastAPI
"""

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel.ext.asyncio.session import AsyncSession
from typing import Optional
import structlog

from kadi.core.auth import verify_token
from kadi.core.config import Settings, get_settings
from kadi.core.database import get_session
from kadi.core.errors import Forbidden, Unauthenticated
from kadi.core.tenancy import TenantContext
from kadi.models.user import User
from kadi.repositories.users import ProfileRepository, UserRepository

logger = structlog.get_logger(__name__)
security = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> User:
    """Verify the bearer credential and load the principal it names"""
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Authentification requise.")

    user_id = verify_token(credentials.credentials, settings)
    if user_id is None:
        raise Unauthenticated("Session invalide.")

    user = await UserRepository(session).get(user_id)
    if user is None:
        raise Unauthenticated("Session invalide.")

    logger.debug("principal_authenticated", user_id=str(user_id))
    return user


async def get_tenant_context(
    user: User = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
) -> TenantContext:
    """Resolve the caller's tenant; principals without one are refused"""
    profile = await ProfileRepository(session).get(user.id)
    if profile is None or profile.tenant_id is None:
        logger.warning("tenant_unresolved", user_id=str(user.id))
        raise Forbidden("Profil ou tenant introuvable.")

    return TenantContext(
        principal_id=user.id,
        tenant_id=profile.tenant_id,
        email=user.email,
        profile=profile,
    )
