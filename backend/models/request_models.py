# Pydantic models for validated API requests
from pydantic import BaseModel, Field


class SearchRequest(BaseModel):
    q: str = Field(..., min_length=2)
    limit: int = 20


class BackfillRequest(BaseModel):
    batch_size: int = Field(50, ge=1, le=200)
