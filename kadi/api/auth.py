"""
Auth API endpoints - signup, login, email confirmation and profile
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession
from datetime import timedelta
from typing import Optional
import structlog

from kadi.core.auth import (
    EMAIL_VERIFICATION_PURPOSE,
    create_access_token,
    create_email_token,
    create_password_reset_token,
    fingerprint_matches,
    hash_password,
    verify_email_token,
    verify_password,
    verify_password_reset_token,
)
from kadi.core.config import Settings, get_settings
from kadi.core.database import get_session
from kadi.core.dependencies import get_current_principal
from kadi.core.errors import Conflict, Forbidden, Unauthenticated, ValidationError
from kadi.models.profile import PROFILE_OPTIONAL_FIELDS, Profile
from kadi.models.timestamps import utcnow
from kadi.models.user import User
from kadi.repositories.users import ProfileRepository, UserRepository, default_company_name
from kadi.schemas.auth import (
    EmailRequest,
    LoginRequest,
    LoginResponse,
    PasswordChangeRequest,
    PasswordResetRequest,
    ProfileRead,
    ProfileUpsert,
    SessionPayload,
    SignupRequest,
    SignupResponse,
    TokenRequest,
    UserSummary,
)
from kadi.schemas.common import MessageResponse
from kadi.services import mailer
from kadi.services.storage import decode_logo, remove_logo, store_logo
from kadi.services.templates import email_verification_template, password_reset_template

logger = structlog.get_logger(__name__)
router = APIRouter()

EMAIL_SENT_MESSAGE = "Compte créé. Un email de confirmation vient de vous être envoyé."
EMAIL_NOT_SENT_MESSAGE = (
    "Compte créé. Impossible d’envoyer automatiquement l’email de confirmation. "
    "Vérifiez la configuration SMTP puis renvoyez l’email depuis l’écran de connexion."
)
NEUTRAL_EMAIL_MESSAGE = "Si un compte correspond à cet email, un message vient d’être envoyé."
INVALID_LINK_MESSAGE = "Lien invalide ou expiré."


def _profile_read(profile: Optional[Profile], user: User) -> ProfileRead:
    """Profile with empty-string defaults and a company fallback"""
    fallback_company = default_company_name(user.email, user.company)
    if profile is None:
        return ProfileRead(company=fallback_company)
    values = {field: getattr(profile, field) for field in PROFILE_OPTIONAL_FIELDS}
    values = {key: value for key, value in values.items() if value is not None}
    return ProfileRead(company=profile.company or fallback_company, **values)


async def _send_verification_email(settings: Settings, user: User, company: Optional[str]) -> mailer.MailResult:
    token = create_email_token(user.id, EMAIL_VERIFICATION_PURPOSE, settings)
    content = email_verification_template(
        settings.APP_NAME,
        f"{settings.email_redirect_url}?token={token}",
        company_name=company,
    )
    return await mailer.send_mail(
        settings, to=user.email, subject=content.subject, html=content.html, text=content.text
    )


@router.post("/signup", response_model=SignupResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    signup_data: SignupRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    """Create the principal, its tenant and profile, then email a confirmation link"""
    users = UserRepository(session)
    if await users.get_by_email(signup_data.email):
        raise Conflict("Un compte existe déjà avec cet email.")

    logo_filename = signup_data.logo_filename or "logo.png"
    if signup_data.logo_file:
        # Reject a bad logo before anything is written
        decode_logo(
            signup_data.logo_file,
            logo_filename.rsplit(".", 1)[-1] if "." in logo_filename else "",
            settings.LOGO_MAX_BYTES,
        )

    # User, tenant and profile are committed together by the profile upsert
    user = await users.create(
        signup_data.email, hash_password(signup_data.password), signup_data.company, commit=False
    )

    fields = signup_data.model_dump(include=set(PROFILE_OPTIONAL_FIELDS), exclude_unset=True)
    logo_url = None
    if signup_data.logo_file:
        logo_url = store_logo(settings, str(user.id), signup_data.logo_file, logo_filename)
        fields["logo_url"] = logo_url

    try:
        profile = await ProfileRepository(session).upsert(user, signup_data.company, fields)
    except Exception:
        await session.rollback()
        if logo_url:
            remove_logo(settings, logo_url)
        logger.warning("signup_rolled_back", email=signup_data.email)
        raise
    logger.info("user_created", user_id=str(user.id))

    result = await _send_verification_email(settings, user, profile.company)
    logger.info("user_signed_up", user_id=str(user.id), email_sent=result.sent)

    return SignupResponse(
        user=UserSummary.model_validate(user),
        profile=_profile_read(profile, user),
        email_confirmation_required=settings.REQUIRE_EMAIL_CONFIRMATION,
        email_verification_sent=result.sent,
        logo_uploaded=logo_url is not None,
        email_send_issue=result.reason,
        message=EMAIL_SENT_MESSAGE if result.sent else EMAIL_NOT_SENT_MESSAGE,
    )


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    """Exchange email and password for a bearer token"""
    users = UserRepository(session)
    user = await users.get_by_email(login_data.email)
    if user is None or not verify_password(login_data.password, user.password_hash):
        logger.warning("login_failed", email=login_data.email)
        raise Unauthenticated("Identifiants invalides.")

    if settings.REQUIRE_EMAIL_CONFIRMATION and not user.email_confirmed:
        raise Forbidden("Email non confirmé. Vérifiez votre boîte de réception.")

    signed_in_at = utcnow()
    user.last_sign_in_at = signed_in_at
    user = await users.save(user)

    expires_in = settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES * 60
    access_token = create_access_token(
        user.id, user.email, expires_delta=timedelta(seconds=expires_in), settings=settings
    )
    summary = UserSummary.model_validate(user)
    logger.info("user_logged_in", user_id=str(user.id))

    return LoginResponse(
        user=summary,
        session=SessionPayload(
            access_token=access_token,
            expires_in=expires_in,
            expires_at=int(signed_in_at.timestamp()) + expires_in,
            user=summary,
        ),
    )


@router.post("/logout", response_model=MessageResponse)
async def logout():
    """Tokens are stateless; the client simply drops its copy"""
    return MessageResponse(message="Déconnecté")


@router.get("/profile", response_model=ProfileRead)
async def get_profile(
    user: User = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    profile = await ProfileRepository(session).get(user.id)
    return _profile_read(profile, user)


@router.post("/profile", response_model=ProfileRead)
async def upsert_profile(
    profile_data: ProfileUpsert,
    user: User = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    """Create or update the caller's profile, creating its tenant if needed"""
    fields = profile_data.model_dump(include=set(PROFILE_OPTIONAL_FIELDS), exclude_unset=True)
    profile = await ProfileRepository(session).upsert(user, profile_data.company, fields)
    return _profile_read(profile, user)


@router.post("/verify-email", response_model=MessageResponse)
async def verify_email(
    token_data: TokenRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    user_id = verify_email_token(token_data.token, EMAIL_VERIFICATION_PURPOSE, settings)
    users = UserRepository(session)
    user = await users.get(user_id) if user_id else None
    if user is None:
        raise ValidationError(INVALID_LINK_MESSAGE)

    if not user.email_confirmed:
        user.email_confirmed_at = utcnow()
        await users.save(user)
        logger.info("email_confirmed", user_id=str(user.id))
    return MessageResponse(message="Email confirmé.")


@router.post("/resend-verification", response_model=MessageResponse)
async def resend_verification(
    email_data: EmailRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    """Resend the confirmation link; the answer never reveals whether the account exists"""
    user = await UserRepository(session).get_by_email(email_data.email)
    if user is not None and not user.email_confirmed:
        profile = await ProfileRepository(session).get(user.id)
        await _send_verification_email(settings, user, profile.company if profile else user.company)
    return MessageResponse(message=NEUTRAL_EMAIL_MESSAGE)


@router.post("/password/forgot", response_model=MessageResponse)
async def forgot_password(
    email_data: EmailRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    user = await UserRepository(session).get_by_email(email_data.email)
    if user is not None:
        token = create_password_reset_token(user.id, user.password_hash, settings)
        content = password_reset_template(
            settings.APP_NAME,
            f"{settings.APP_URL.rstrip('/')}/auth/reset-password?token={token}",
            company_name=user.company,
        )
        result = await mailer.send_mail(
            settings, to=user.email, subject=content.subject, html=content.html, text=content.text
        )
        logger.info("password_reset_requested", user_id=str(user.id), email_sent=result.sent)
    return MessageResponse(message=NEUTRAL_EMAIL_MESSAGE)


@router.post("/password/reset", response_model=MessageResponse)
async def reset_password(
    reset_data: PasswordResetRequest,
    session: AsyncSession = Depends(get_session),
    settings: Settings = Depends(get_settings),
):
    """Set a new password from a reset link; a link stops working once the password changes"""
    claims = verify_password_reset_token(reset_data.token, settings)
    users = UserRepository(session)
    user = await users.get(claims[0]) if claims else None
    if user is None or not fingerprint_matches(claims[1], user.password_hash):
        raise ValidationError(INVALID_LINK_MESSAGE)

    user.password_hash = hash_password(reset_data.password)
    await users.save(user)
    logger.info("password_reset", user_id=str(user.id))
    return MessageResponse(message="Mot de passe mis à jour.")


@router.post("/password/change", response_model=MessageResponse)
async def change_password(
    change_data: PasswordChangeRequest,
    user: User = Depends(get_current_principal),
    session: AsyncSession = Depends(get_session),
):
    if not verify_password(change_data.current_password, user.password_hash):
        raise ValidationError("Mot de passe actuel incorrect.")

    user.password_hash = hash_password(change_data.new_password)
    await UserRepository(session).save(user)
    logger.info("password_changed", user_id=str(user.id))
    return MessageResponse(message="Mot de passe mis à jour.")
