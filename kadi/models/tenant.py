"""
Tenant model - Multi-tenancy foundation
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
import uuid

from kadi.models.timestamps import TIMESTAMP, utcnow


class Tenant(SQLModel, table=True):
    """Isolation boundary owning clients, catalog items and invoices"""

    __tablename__ = "tenants"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(max_length=255, index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP)
