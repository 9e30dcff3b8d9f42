"""
Pydantic schemas for authentication and profiles
"""

from pydantic import BaseModel, Field, EmailStr
from typing import Optional
from datetime import datetime
import uuid


class ProfileFields(BaseModel):
    """Optional company metadata shared by signup and profile upsert"""
    logo_url: Optional[str] = Field(default=None, max_length=1000)
    manager_name: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = Field(default=None, max_length=500)
    city: Optional[str] = Field(default=None, max_length=255)
    state: Optional[str] = Field(default=None, max_length=255)
    tagline: Optional[str] = Field(default=None, max_length=255)
    national_id: Optional[str] = Field(default=None, max_length=100)
    rccm: Optional[str] = Field(default=None, max_length=100)
    nif: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)
    website: Optional[str] = Field(default=None, max_length=500)

    class Config:
        str_strip_whitespace = True


class SignupRequest(ProfileFields):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    company: Optional[str] = Field(default=None, max_length=255)
    logo_file: Optional[str] = None
    logo_filename: Optional[str] = Field(default=None, max_length=255)


class ProfileUpsert(ProfileFields):
    company: Optional[str] = Field(default=None, max_length=255)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)


class EmailRequest(BaseModel):
    email: EmailStr


class TokenRequest(BaseModel):
    token: str = Field(..., min_length=1)


class PasswordResetRequest(BaseModel):
    token: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6, max_length=72)


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(..., alias="currentPassword", max_length=72)
    new_password: str = Field(..., alias="newPassword", min_length=6, max_length=72)

    class Config:
        populate_by_name = True


class UserSummary(BaseModel):
    id: uuid.UUID
    email: str
    email_confirmed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProfileRead(BaseModel):
    """Profile as shown to its owner; missing text fields read as empty strings"""
    company: str = ""
    tagline: str = ""
    logo_url: Optional[str] = None
    manager_name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    national_id: str = ""
    rccm: str = ""
    nif: str = ""
    phone: str = ""
    website: str = ""


class SessionPayload(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    expires_at: int
    user: UserSummary


class LoginResponse(BaseModel):
    user: UserSummary
    session: SessionPayload


class SignupResponse(BaseModel):
    user: UserSummary
    profile: ProfileRead
    email_confirmation_required: bool = Field(..., alias="emailConfirmationRequired")
    email_verification_sent: bool = Field(..., alias="emailVerificationSent")
    logo_uploaded: bool = Field(..., alias="logoUploaded")
    email_send_issue: Optional[str] = Field(default=None, alias="emailSendIssue")
    message: str

    class Config:
        populate_by_name = True
