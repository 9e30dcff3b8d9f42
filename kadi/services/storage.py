"""Logo storage for company profiles."""
from __future__ import annotations

import base64
import binascii
import re
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from kadi.core.config import Settings
from kadi.core.errors import ValidationError

_DATA_URL = re.compile(r"^data:(.*?);base64,(.*)$", re.DOTALL)

MIME_BY_EXTENSION = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "webp": "image/webp",
    "svg": "image/svg+xml",
}
EXTENSION_BY_MIME = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/svg+xml": "svg",
}


@dataclass(frozen=True)
class DecodedLogo:
    content: bytes
    mime_type: str
    extension: str


def sanitize_path_segment(value: str) -> str:
    return re.sub(r"[^a-z0-9_-]", "-", str(value).strip().lower())


def _split_filename(filename: str) -> Tuple[str, str]:
    if "." not in filename:
        return filename, ""
    stem, extension = filename.rsplit(".", 1)
    return stem, extension


def decode_logo(value: Optional[str], fallback_extension: str = "", max_bytes: int = 1024 * 1024) -> DecodedLogo:
    """Decode a base64 or data-URL logo, enforcing the size ceiling."""
    if not value or not isinstance(value, str):
        raise ValidationError("Logo invalide.")

    match = _DATA_URL.match(value)
    payload = match.group(2) if match else value
    mime_type = match.group(1) if match else MIME_BY_EXTENSION.get(fallback_extension.lower(), "")

    try:
        content = base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError):
        raise ValidationError("Logo vide ou corrompu.")
    if not content:
        raise ValidationError("Logo vide ou corrompu.")
    if len(content) > max_bytes:
        raise ValidationError("Logo trop volumineux (1 Mo max).")

    extension = re.sub(r"[^a-z0-9]", "", fallback_extension.lower()) or EXTENSION_BY_MIME.get(mime_type.lower(), "png")
    return DecodedLogo(
        content=content,
        mime_type=mime_type or MIME_BY_EXTENSION.get(extension, "application/octet-stream"),
        extension=extension,
    )


def store_logo(settings: Settings, user_id: str, encoded: str, original_filename: str = "logo.png") -> str:
    """Persist the logo under the user's folder and return its public URL path."""
    stem, provided_extension = _split_filename(original_filename or "logo.png")
    logo = decode_logo(encoded, provided_extension, settings.LOGO_MAX_BYTES)

    safe_name = sanitize_path_segment(stem) or "logo"
    suffix = f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"
    user_segment = sanitize_path_segment(user_id)
    relative = f"{user_segment}/{safe_name}-{suffix}.{logo.extension}"

    destination = Path(settings.UPLOAD_FOLDER) / relative
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(logo.content)

    return f"{settings.PUBLIC_UPLOAD_PATH.rstrip('/')}/{relative}"


def remove_logo(settings: Settings, public_url: str) -> None:
    """Delete a logo written by store_logo; URLs outside the upload path are left alone."""
    prefix = f"{settings.PUBLIC_UPLOAD_PATH.rstrip('/')}/"
    if not public_url.startswith(prefix):
        return
    (Path(settings.UPLOAD_FOLDER) / public_url[len(prefix):]).unlink(missing_ok=True)
