"""
Profile model linking a principal to its tenant and company details
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
import uuid

from kadi.models.timestamps import TIMESTAMP, utcnow


PROFILE_OPTIONAL_FIELDS = (
    "logo_url",
    "manager_name",
    "address",
    "city",
    "state",
    "tagline",
    "national_id",
    "rccm",
    "nif",
    "phone",
    "website",
)


class Profile(SQLModel, table=True):
    """One profile per principal, sharing the principal's id"""

    __tablename__ = "profiles"

    id: uuid.UUID = Field(foreign_key="users.id", primary_key=True)
    tenant_id: uuid.UUID = Field(
        foreign_key="tenants.id",
        index=True,
        description="Tenant ID for multi-tenant isolation"
    )
    email: str = Field(max_length=255)

    # Company metadata
    company: Optional[str] = Field(default=None, max_length=255)
    tagline: Optional[str] = Field(default=None, max_length=255)
    logo_url: Optional[str] = Field(default=None, max_length=1000)
    manager_name: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=255)
    state: Optional[str] = Field(default=None, max_length=255)

    # Legal identifiers
    national_id: Optional[str] = Field(default=None, max_length=100)
    rccm: Optional[str] = Field(default=None, max_length=100)
    nif: Optional[str] = Field(default=None, max_length=100)

    # Contact
    phone: Optional[str] = Field(default=None, max_length=50)
    website: Optional[str] = Field(default=None, max_length=500)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP)
    updated_at: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP)
