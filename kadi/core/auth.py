"""
JWT authentication and password hashing utilities
"""

from datetime import datetime, timedelta, timezone
from jose import JWTError, jwt
from passlib.context import CryptContext
from typing import Dict, Optional, Tuple
import hashlib
import hmac
import uuid

from kadi.core.config import Settings, get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ACCESS_TOKEN_PURPOSE = "access"
EMAIL_VERIFICATION_PURPOSE = "email_verification"
PASSWORD_RESET_PURPOSE = "password_reset"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        return False


def _encode(claims: Dict, expires_delta: timedelta, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {**claims, "exp": now + expires_delta, "iat": now}
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(
    user_id: uuid.UUID,
    email: str,
    expires_delta: Optional[timedelta] = None,
    settings: Optional[Settings] = None,
) -> str:
    """Create JWT access token with user claims"""
    settings = settings or get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)

    return _encode(
        {"sub": str(user_id), "email": email, "purpose": ACCESS_TOKEN_PURPOSE},
        expires_delta,
        settings,
    )


def create_email_token(
    user_id: uuid.UUID,
    purpose: str,
    settings: Optional[Settings] = None,
) -> str:
    """Single-purpose token embedded in confirmation and reset links"""
    settings = settings or get_settings()
    return _encode(
        {"sub": str(user_id), "purpose": purpose},
        timedelta(minutes=settings.EMAIL_TOKEN_EXPIRE_MINUTES),
        settings,
    )


def decode_access_token(token: str, settings: Optional[Settings] = None) -> Optional[Dict]:
    """Decode and validate JWT token"""
    settings = settings or get_settings()
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def _subject(payload: Optional[Dict], purpose: str) -> Optional[uuid.UUID]:
    if payload is None or payload.get("purpose") != purpose:
        return None
    try:
        return uuid.UUID(payload.get("sub"))
    except (TypeError, ValueError):
        return None


def verify_token(token: str, settings: Optional[Settings] = None) -> Optional[uuid.UUID]:
    """Verify an access token and return user_id if valid"""
    return _subject(decode_access_token(token, settings), ACCESS_TOKEN_PURPOSE)


def verify_email_token(token: str, purpose: str, settings: Optional[Settings] = None) -> Optional[uuid.UUID]:
    return _subject(decode_access_token(token, settings), purpose)


def password_fingerprint(password_hash: str) -> str:
    """Short digest of the stored hash; changes whenever the password does"""
    return hashlib.sha256(password_hash.encode("utf-8")).hexdigest()[:16]


def create_password_reset_token(
    user_id: uuid.UUID,
    password_hash: str,
    settings: Optional[Settings] = None,
) -> str:
    """Reset link token bound to the current password, so it works only once"""
    settings = settings or get_settings()
    return _encode(
        {"sub": str(user_id), "purpose": PASSWORD_RESET_PURPOSE, "pwd": password_fingerprint(password_hash)},
        timedelta(minutes=settings.EMAIL_TOKEN_EXPIRE_MINUTES),
        settings,
    )


def verify_password_reset_token(
    token: str, settings: Optional[Settings] = None
) -> Optional[Tuple[uuid.UUID, str]]:
    """Return (user_id, password fingerprint) for a well-formed reset token"""
    payload = decode_access_token(token, settings)
    user_id = _subject(payload, PASSWORD_RESET_PURPOSE)
    fingerprint = payload.get("pwd") if payload else None
    if user_id is None or not isinstance(fingerprint, str):
        return None
    return user_id, fingerprint


def fingerprint_matches(fingerprint: str, password_hash: str) -> bool:
    return hmac.compare_digest(fingerprint, password_fingerprint(password_hash))
