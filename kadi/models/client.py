"""
Client model - customers billed by a tenant
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
import uuid

from kadi.models.timestamps import TIMESTAMP, utcnow


class Client(SQLModel, table=True):
    """Customer record owned by exactly one tenant"""

    __tablename__ = "clients"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    tenant_id: uuid.UUID = Field(
        foreign_key="tenants.id",
        index=True,
        description="Tenant ID for multi-tenant isolation"
    )

    # Client details
    company_name: str = Field(max_length=255, nullable=False)
    contact_name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, max_length=1000)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP, index=True)
    updated_at: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP)
