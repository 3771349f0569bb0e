# Models for catalog products and search results
from pydantic import BaseModel, Field
from typing import List, Optional


class ProductRecord(BaseModel):
    """Product row from the catalog store"""
    id: int
    name: str = Field(..., min_length=1)
    price_cents: Optional[int] = None
    embedding: Optional[List[float]] = None  # 1536-dimensional once set


class SearchResult(BaseModel):
    id: int
    name: str
    price_cents: Optional[int] = None
    distance: Optional[float] = None  # lower = more similar


class BackfillBatchResult(BaseModel):
    """Counts for one backfill batch"""
    scanned: int = 0
    embedded: int = 0
    skipped: int = 0
    batch_size: int
    message: Optional[str] = None
