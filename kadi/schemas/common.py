"""
Shared response schemas
"""

from pydantic import BaseModel, Field


class PaginationMeta(BaseModel):
    """Pagination block returned next to every paginated list"""
    page: int
    page_size: int = Field(..., alias="pageSize")
    total: int
    total_pages: int = Field(..., alias="totalPages")

    class Config:
        populate_by_name = True


class MessageResponse(BaseModel):
    message: str
