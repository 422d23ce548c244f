# Models for catalogue products read by the feed
import json
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


class Product(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    brand: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    source_url: Optional[str] = None
    img_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    embedding: Optional[List[float]] = Field(default=None, exclude=True)
    created_at: Optional[datetime] = None
    similarity: Optional[float] = None  # set by the vector matcher

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _default_tags(cls, value: Any) -> Any:
        return value or []

    @field_validator("embedding", mode="before")
    @classmethod
    def _parse_embedding(cls, value: Any) -> Any:
        # pgvector columns come back as text, e.g. "[0.1,0.2]"
        if isinstance(value, str):
            try:
                return json.loads(value)
            except ValueError:
                return None
        return value


def parse_products(rows: Optional[Iterable[Dict[str, Any]]]) -> List[Product]:
    """
    Validate raw product rows, skipping the ones that do not fit the model
    """
    products = []
    for row in rows or []:
        try:
            products.append(Product.model_validate(row))
        except ValidationError as e:
            row_id = row.get("id") if isinstance(row, dict) else None
            logger.warning(f"Skipping malformed product row {row_id}: {e.error_count()} validation errors")
    return products
