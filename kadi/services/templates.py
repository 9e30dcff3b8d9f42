"""French transactional email bodies."""
from __future__ import annotations

from dataclasses import dataclass
from html import escape
from typing import Optional

BASE_STYLES = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;"
    " color: #1d1d1f; background: #f5f5f7; padding: 32px 0;"
)
CARD_STYLES = (
    "max-width: 520px; margin: 0 auto; background: rgba(255,255,255,0.95);"
    " border-radius: 28px; padding: 32px; border: 1px solid rgba(15,23,42,0.06);"
)
BUTTON_STYLES = (
    "display: inline-block; background: #0a84ff; color: #ffffff; border-radius: 999px;"
    " padding: 14px 34px; font-weight: 600; text-decoration: none;"
)
MUTED = "font-size: 13px; color: #6e6e73;"


@dataclass(frozen=True)
class EmailContent:
    subject: str
    html: str
    text: str


def _card(app_name: str, heading: str, intro: str, url: str, button: str, footer: str) -> str:
    return (
        f'<div style="{BASE_STYLES}"><div style="{CARD_STYLES}">'
        f'<h1 style="font-size: 24px; margin-bottom: 12px;">{heading}</h1>'
        f'<p style="margin: 0 0 16px 0; font-size: 16px;">{intro}</p>'
        f'<p style="margin: 0 0 28px 0;"><a href="{escape(url)}" style="{BUTTON_STYLES}">{button}</a></p>'
        f'<p style="{MUTED}">Le bouton ne fonctionne pas ? Copiez ce lien dans votre navigateur :</p>'
        f'<p style="{MUTED} word-break: break-all;">{escape(url)}</p>'
        f'<hr style="margin: 32px 0; border: none; border-top: 1px solid rgba(15,23,42,0.08);" />'
        f'<p style="{MUTED}">{footer}</p>'
        f'<p style="{MUTED}">L\'équipe {escape(app_name)}</p>'
        "</div></div>"
    )


def email_verification_template(app_name: str, verification_url: str, company_name: Optional[str] = None) -> EmailContent:
    company = escape(company_name) if company_name else ""
    return EmailContent(
        subject=f"Confirmez votre email pour {app_name}",
        html=_card(
            app_name,
            heading=f"Bienvenue {'chez ' + company if company else ''}",
            intro=(
                f"Merci d'avoir créé un compte sur <strong>{escape(app_name)}</strong>. "
                "Pour finaliser votre inscription, confirmez votre adresse email."
            ),
            url=verification_url,
            button="Confirmer mon email",
            footer=(
                f"Cet email vous est adressé car une inscription a été réalisée sur {escape(app_name)}. "
                "Si ce n'était pas vous, ignorez ce message."
            ),
        ),
        text="\n".join([
            f"Bienvenue chez {company_name or app_name}!",
            "",
            f"Merci d'avoir créé un compte sur {app_name}. Pour finaliser votre inscription, "
            "veuillez confirmer votre adresse email :",
            verification_url,
            "",
            "Si vous n'êtes pas à l'origine de cette demande, ignorez simplement cet email.",
        ]),
    )


def password_reset_template(app_name: str, reset_url: str, company_name: Optional[str] = None) -> EmailContent:
    company = escape(company_name) if company_name else ""
    return EmailContent(
        subject=f"Réinitialisez votre mot de passe {app_name}",
        html=_card(
            app_name,
            heading=f"Bonjour{' ' + company if company else ''}",
            intro=(
                "Nous avons reçu une demande de réinitialisation de mot de passe pour votre compte "
                f"<strong>{escape(app_name)}</strong>."
            ),
            url=reset_url,
            button="Créer un nouveau mot de passe",
            footer="Si vous n'êtes pas à l'origine de cette demande, aucune action n'est requise.",
        ),
        text="\n".join([
            f"Bonjour {company_name or ''}".strip(),
            "",
            f"Nous avons reçu une demande de réinitialisation de mot de passe pour {app_name}.",
            "Suivez ce lien pour créer un nouveau mot de passe :",
            reset_url,
            "",
            "Si vous n'avez pas fait cette demande, ignorez simplement ce message.",
        ]),
    )
