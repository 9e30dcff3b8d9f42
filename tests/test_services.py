"""
Tests for logo storage, email templates and mail delivery
"""

import base64
import smtplib

import pytest

from kadi.core.config import Settings
from kadi.core.errors import ValidationError
from kadi.services import mailer
from kadi.services.storage import decode_logo, remove_logo, sanitize_path_segment, store_logo
from kadi.services.templates import email_verification_template, password_reset_template


def test_decode_data_url_logo():
    encoded = "data:image/webp;base64," + base64.b64encode(b"webp-bytes").decode()
    logo = decode_logo(encoded)
    assert logo.content == b"webp-bytes"
    assert logo.mime_type == "image/webp"
    assert logo.extension == "webp"


def test_decode_plain_base64_uses_filename_extension():
    logo = decode_logo(base64.b64encode(b"jpeg-bytes").decode(), "JPG")
    assert logo.extension == "jpg"
    assert logo.mime_type == "image/jpeg"


@pytest.mark.parametrize("value, message", [
    (None, "Logo invalide."),
    ("", "Logo invalide."),
    ("data:image/png;base64,", "Logo vide ou corrompu."),
])
def test_decode_rejects_bad_logos(value, message):
    with pytest.raises(ValidationError) as excinfo:
        decode_logo(value)
    assert excinfo.value.message == message


def test_store_logo_writes_under_user_folder(tmp_path):
    settings = Settings(UPLOAD_FOLDER=str(tmp_path), PUBLIC_UPLOAD_PATH="/uploads/")
    url = store_logo(settings, "User-42", base64.b64encode(b"png").decode(), "Logo Final.PNG")
    assert url.startswith("/uploads/user-42/logo-final-")
    assert url.endswith(".png")
    assert (tmp_path / url[len("/uploads/"):]).read_bytes() == b"png"

    remove_logo(settings, url)
    assert not (tmp_path / url[len("/uploads/"):]).exists()
    # Already gone, or outside the upload path: nothing to do
    remove_logo(settings, url)
    remove_logo(settings, "https://cdn.example/logo.png")


def test_sanitize_path_segment():
    assert sanitize_path_segment(" Mon Logo! ") == "mon-logo-"


def test_templates_embed_the_link():
    verification = email_verification_template("Kadi", "https://kadi.test/auth/callback?token=abc", "Acme <b>")
    assert "https://kadi.test/auth/callback?token=abc" in verification.text
    assert "Acme &lt;b&gt;" in verification.html
    assert verification.subject == "Confirmez votre email pour Kadi"

    reset = password_reset_template("Kadi", "https://kadi.test/auth/reset-password?token=xyz")
    assert "token=xyz" in reset.html
    assert "token=xyz" in reset.text


@pytest.mark.asyncio
async def test_send_mail_without_transport():
    result = await mailer.send_mail(Settings(SMTP_HOST=None), to="a@b.test", subject="s", html="<p>h</p>", text="t")
    assert result.sent is False
    assert result.reason == "transporter_not_configured"


@pytest.mark.asyncio
async def test_send_mail_delivers_and_reports_errors(monkeypatch):
    settings = Settings(SMTP_HOST="smtp.test", SMTP_USER="bot@kadi.test", SMTP_PASS="pw")
    delivered = []
    monkeypatch.setattr(mailer, "_deliver", lambda settings, msg: delivered.append(msg))

    result = await mailer.send_mail(settings, to="a@b.test", subject="Bonjour", html="<p>h</p>", text="t")
    assert result.sent is True
    assert delivered[0]["To"] == "a@b.test"
    assert delivered[0]["From"] == "Kadi <bot@kadi.test>"
    assert result.message_id == delivered[0]["Message-ID"]
    assert result.message_id.startswith("<") and result.message_id.endswith("@kadi.test>")

    def broken(settings, msg):
        raise smtplib.SMTPException("boom")

    monkeypatch.setattr(mailer, "_deliver", broken)
    result = await mailer.send_mail(settings, to="a@b.test", subject="Bonjour", html="<p>h</p>", text="t")
    assert result.sent is False
    assert result.reason == "smtp_error"
