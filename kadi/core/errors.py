"""
Error taxonomy and translation of failures into HTTP responses
"""

from http import HTTPStatus
from typing import Any, Dict, Optional, Tuple

from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import DBAPIError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette import status


GENERIC_SERVER_MESSAGE = "Une erreur interne est survenue. Veuillez réessayer plus tard."
GENERIC_CLIENT_MESSAGE = "Requête invalide."
INVALID_FORMAT_MESSAGE = "Format de donnée invalide, merci de vérifier les informations envoyées."
DUPLICATE_SKU_MESSAGE = "Ce SKU est déjà utilisé pour un autre élément de votre catalogue."
UNIQUE_VALUE_MESSAGE = "Cette valeur doit être unique."
LINKED_RESOURCE_MESSAGE = "Cette opération est impossible car la ressource est liée à d’autres données."

# French wording for framework errors raised with their stock English detail
HTTP_STATUS_MESSAGES = {
    status.HTTP_400_BAD_REQUEST: GENERIC_CLIENT_MESSAGE,
    status.HTTP_401_UNAUTHORIZED: "Authentification requise.",
    status.HTTP_403_FORBIDDEN: "Accès refusé.",
    status.HTTP_404_NOT_FOUND: "Ressource introuvable.",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Méthode non autorisée.",
    status.HTTP_406_NOT_ACCEPTABLE: "Format de réponse non disponible.",
    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE: "Requête trop volumineuse.",
    status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: "Type de contenu non pris en charge.",
    status.HTTP_429_TOO_MANY_REQUESTS: "Trop de requêtes. Veuillez réessayer plus tard.",
}

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
INVALID_TEXT_REPRESENTATION = "22P02"

CATALOG_SKU_CONSTRAINT = "catalog_items_tenant_sku_key"


class KadiError(Exception):
    """Base class for failures carrying an HTTP status and a user-facing message"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = GENERIC_SERVER_MESSAGE

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(KadiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = GENERIC_CLIENT_MESSAGE


class Unauthenticated(KadiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentification requise."


class Forbidden(KadiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Accès refusé."


class NotFound(KadiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Ressource introuvable."


class Conflict(KadiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = UNIQUE_VALUE_MESSAGE


class ConfigurationError(KadiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Configuration manquante."


class UpstreamError(KadiError):
    """Failure reported by the mail, identity or language-model integration"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class InternalError(KadiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def database_diagnostics(error: BaseException) -> Dict[str, Any]:
    """Extract sqlstate, constraint and detail from a driver error, if any"""
    if not isinstance(error, DBAPIError):
        return {}

    orig = error.orig
    candidates = [orig, getattr(orig, "__cause__", None)]
    code = None
    constraint = None
    detail = None
    for candidate in candidates:
        if candidate is None:
            continue
        code = code or getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        constraint = constraint or getattr(candidate, "constraint_name", None)
        detail = detail or getattr(candidate, "detail", None)
        diag = getattr(candidate, "diag", None)
        if diag is not None:
            constraint = constraint or getattr(diag, "constraint_name", None)

    message = str(orig) if orig is not None else str(error)
    if code is None:
        # SQLite reports constraint failures only through the message text
        lowered = message.lower()
        if "unique constraint failed" in lowered:
            code = UNIQUE_VIOLATION
            constraint = constraint or message.split(":", 1)[-1].strip()
        elif "foreign key constraint failed" in lowered:
            code = FOREIGN_KEY_VIOLATION

    return {
        "code": code,
        "constraint": constraint,
        "details": detail,
        "original_message": message,
    }


def map_database_error(error: BaseException) -> Optional[Tuple[int, str]]:
    diagnostics = database_diagnostics(error)
    code = diagnostics.get("code")
    if not code:
        return None

    if code == UNIQUE_VIOLATION:
        constraint = diagnostics.get("constraint") or diagnostics.get("original_message") or ""
        if CATALOG_SKU_CONSTRAINT in constraint or "catalog_items.sku" in constraint:
            return status.HTTP_409_CONFLICT, DUPLICATE_SKU_MESSAGE
        return status.HTTP_409_CONFLICT, UNIQUE_VALUE_MESSAGE

    if code == FOREIGN_KEY_VIOLATION:
        return status.HTTP_409_CONFLICT, LINKED_RESOURCE_MESSAGE

    if code == INVALID_TEXT_REPRESENTATION:
        return status.HTTP_400_BAD_REQUEST, INVALID_FORMAT_MESSAGE

    return None


def translate_http_detail(code: int, detail: Any) -> Any:
    """Swap a stock English reason phrase for its French message"""
    try:
        stock = HTTPStatus(code).phrase
    except ValueError:
        return detail
    if detail == stock:
        return HTTP_STATUS_MESSAGES.get(code, GENERIC_CLIENT_MESSAGE if code < 500 else GENERIC_SERVER_MESSAGE)
    return detail


def build_error_response(error: BaseException) -> Tuple[int, str]:
    """Return the (status, message) pair exposed to the client"""
    mapped = map_database_error(error)
    if mapped:
        return mapped

    if isinstance(error, RequestValidationError):
        return status.HTTP_400_BAD_REQUEST, INVALID_FORMAT_MESSAGE

    if isinstance(error, KadiError):
        code, message = error.status_code, error.message
    elif isinstance(error, StarletteHTTPException):
        code, message = error.status_code, translate_http_detail(error.status_code, error.detail)
    else:
        code, message = status.HTTP_500_INTERNAL_SERVER_ERROR, None

    if not isinstance(code, int):
        code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if code < 500 and message:
        return code, str(message)

    return code, GENERIC_SERVER_MESSAGE if code >= 500 else GENERIC_CLIENT_MESSAGE
