"""
Schemas shared across resources.
"""
from pydantic import BaseModel


class Pagination(BaseModel):
    """Pagination block of list responses."""
    page: int
    limit: int
    total: int
    pages: int


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str
