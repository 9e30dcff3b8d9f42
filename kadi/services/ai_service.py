"""Invoice drafting from free text through the Gemini API."""
from __future__ import annotations

import json
from typing import Any, Optional

import structlog

from kadi.core.config import Settings
from kadi.core.errors import ConfigurationError, ValidationError

logger = structlog.get_logger(__name__)

SYSTEM_INSTRUCTION = "Tu es un assistant qui crée des factures JSON valides."
PROMPT_TEMPLATE = (
    "Analyse ce texte et renvoie une facture JSON strictement valide avec les clés "
    "client_id, issue_date, due_date, status, notes, currency et items "
    "(chaque item : description, quantity, unitPrice) : {texte}"
)


class InvoiceDraftService:
    """One JSON-mode completion per request; the parsed object goes back untouched."""

    def __init__(self, api_key: Optional[str], model: str, client: Any = None) -> None:
        self.api_key = api_key
        self.model = model
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "InvoiceDraftService":
        return cls(api_key=settings.GEMINI_API_KEY, model=settings.AI_MODEL)

    def _client_instance(self):
        """Lazily create a Gemini client."""
        if self._client is not None:
            return self._client
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY manquant.")
        from google import genai

        self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def draft_from_text(self, texte: Optional[str]) -> Any:
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY manquant.")
        if not texte or not str(texte).strip():
            raise ValidationError("Le champ texte est requis.")

        from google.genai import types

        client = self._client_instance()
        response = await client.aio.models.generate_content(
            model=self.model,
            contents=PROMPT_TEMPLATE.format(texte=texte),
            config=types.GenerateContentConfig(
                system_instruction=SYSTEM_INSTRUCTION,
                response_mime_type="application/json",
            ),
        )
        raw = getattr(response, "text", None) or ""
        logger.info("ai_draft_generated", model=self.model, response_chars=len(raw))
        # A non-JSON answer surfaces as a 500 through the error mapper
        return json.loads(raw)
