# Models for the feed response
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from feed_service.models.product_models import Product


class FeedSource(str, Enum):
    SOCIAL = "social"
    SEMANTIC = "semantic"
    FALLBACK = "fallback"


class FeedItem(BaseModel):
    """A product plus the source that put it in the feed"""
    product: Optional[Product] = None
    source: FeedSource
    provenance: str
    referral_id: Optional[str] = None
    shared_by: Optional[str] = None
    message: Optional[str] = None


class FeedResult(BaseModel):
    items: List[FeedItem] = Field(default_factory=list)
    query: str = ""
