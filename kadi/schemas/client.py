"""
Pydantic schemas for clients
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
import uuid

from kadi.schemas.common import PaginationMeta


class ClientCreate(BaseModel):
    """Allow-listed fields accepted when creating a client"""
    company_name: str = Field(..., min_length=1, max_length=255)
    contact_name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, max_length=1000)

    class Config:
        str_strip_whitespace = True


class ClientUpdate(BaseModel):
    """Partial update; absent fields are left untouched"""
    company_name: Optional[str] = Field(default=None, max_length=255)
    contact_name: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, max_length=1000)

    class Config:
        str_strip_whitespace = True

    @field_validator("company_name")
    @classmethod
    def company_name_not_blank(cls, value: Optional[str]) -> str:
        if not value:
            raise ValueError("company_name cannot be empty")
        return value


class ClientRead(BaseModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    company_name: str
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ClientPage(BaseModel):
    data: List[ClientRead]
    pagination: PaginationMeta
