"""Response models shared by every collection router."""
from pydantic import BaseModel, Field


class Pagination(BaseModel):
    """Pagination block of a list response."""

    currentPage: int = Field(..., description="Current page number")
    totalPages: int = Field(..., description="ceil(totalItems / limit)")
    totalItems: int = Field(..., description="Number of records matching the filters")
    hasNext: bool
    hasPrev: bool


class MessageResponse(BaseModel):
    message: str
