"""
Feed administration schemas.
"""

from pydantic import BaseModel
from typing import Optional, Literal
from datetime import datetime


class FeedCacheStatus(BaseModel):
    """Current state of the cached feed document."""
    cached: bool
    fresh: bool = False
    generated_at: Optional[datetime] = None
    age_seconds: Optional[int] = None
    ttl_seconds: int
    items_count: Optional[int] = None


class FeedInvalidateRequest(BaseModel):
    """Cache invalidation request sent after a product change."""
    product_id: Optional[str] = None
    action: Optional[Literal["create", "update", "delete"]] = None


class FeedInvalidateResponse(BaseModel):
    """Cache invalidation result."""
    success: bool = True
    invalidated: bool
    message: str
    timestamp: datetime
