"""
Pydantic schemas for AI drafting
"""

from pydantic import BaseModel
from typing import Optional


class DraftRequest(BaseModel):
    """Free text describing the invoice to draft"""
    texte: Optional[str] = None
