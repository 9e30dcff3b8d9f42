"""
Principal model backing the identity provider
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
import uuid

from kadi.models.timestamps import TIMESTAMP, utcnow


class User(SQLModel, table=True):
    """Authenticated principal; tenant membership lives on its profile"""

    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Authentication
    email: str = Field(index=True, unique=True, nullable=False, max_length=255)
    password_hash: str = Field(nullable=False)

    # Signup metadata
    company: Optional[str] = Field(default=None, max_length=255)

    # Status
    email_confirmed_at: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_type=TIMESTAMP)
    updated_at: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP)
    last_sign_in_at: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP)

    @property
    def email_confirmed(self) -> bool:
        return self.email_confirmed_at is not None
