"""
Principal and profile data access (keyed by principal, not by tenant)
"""

from typing import Any, Mapping, Optional
import uuid

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
import structlog

from kadi.models.profile import Profile, PROFILE_OPTIONAL_FIELDS
from kadi.models.tenant import Tenant
from kadi.models.timestamps import utcnow
from kadi.models.user import User

logger = structlog.get_logger(__name__)


def default_company_name(email: str, company: Optional[str] = None) -> str:
    return (company or "").strip() or email.split("@")[0] or "Organisation"


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.exec(select(User).where(User.email == email.strip().lower()))
        return result.first()

    async def save(self, user: User) -> User:
        user.updated_at = utcnow()
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def create(
        self,
        email: str,
        password_hash: str,
        company: Optional[str] = None,
        commit: bool = True,
    ) -> User:
        """Add a principal; with commit=False it is only flushed into the caller's unit of work"""
        user = User(email=email.strip().lower(), password_hash=password_hash, company=company)
        self.session.add(user)
        if not commit:
            await self.session.flush()
            return user
        await self.session.commit()
        await self.session.refresh(user)
        logger.info("user_created", user_id=str(user.id))
        return user


class ProfileRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: uuid.UUID) -> Optional[Profile]:
        return await self.session.get(Profile, user_id)

    async def upsert(
        self,
        user: User,
        company: Optional[str] = None,
        fields: Optional[Mapping[str, Any]] = None,
    ) -> Profile:
        """Create or update the principal's profile, creating its tenant on first use"""
        fields = fields or {}
        profile = await self.get(user.id)
        company_name = (company or "").strip() or (profile.company if profile else None)
        company_name = default_company_name(user.email, company_name or user.company)

        if profile is None:
            tenant = Tenant(name=company_name)
            self.session.add(tenant)
            await self.session.flush()
            profile = Profile(id=user.id, tenant_id=tenant.id, email=user.email)
            logger.info("tenant_created", tenant_id=str(tenant.id), user_id=str(user.id))
        else:
            profile.updated_at = utcnow()

        profile.email = user.email
        profile.company = company_name
        for field in PROFILE_OPTIONAL_FIELDS:
            if field in fields:
                setattr(profile, field, fields[field])

        self.session.add(profile)
        await self.session.commit()
        await self.session.refresh(profile)
        return profile
