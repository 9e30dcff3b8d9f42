"""
AI drafting API endpoints
"""

from fastapi import APIRouter, Depends
from typing import Any
import structlog

from kadi.core.config import Settings, get_settings
from kadi.core.dependencies import get_current_principal
from kadi.models.user import User
from kadi.schemas.ai import DraftRequest
from kadi.services.ai_service import InvoiceDraftService

logger = structlog.get_logger(__name__)

router = APIRouter()


def get_invoice_draft_service(settings: Settings = Depends(get_settings)) -> InvoiceDraftService:
    return InvoiceDraftService.from_settings(settings)


@router.post("/facture")
async def draft_invoice(
    request: DraftRequest,
    user: User = Depends(get_current_principal),
    service: InvoiceDraftService = Depends(get_invoice_draft_service),
) -> Any:
    """Turn a free-text description into an invoice draft, returned as the model produced it"""
    logger.info("ai_draft_requested", user_id=str(user.id))
    return await service.draft_from_text(request.texte)
