# Pydantic models for outgoing API responses
from pydantic import BaseModel
from typing import List, Optional

from .product_models import SearchResult


class SearchResponse(BaseModel):
    results: List[SearchResult]


class BackfillResponse(BaseModel):
    scanned: int
    embedded: int
    skipped: int
    batch_size: int
    message: Optional[str] = None


class ErrorResponse(BaseModel):
    error: str
