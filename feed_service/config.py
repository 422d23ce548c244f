# Runtime configuration for the feed service
import os
from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field


class FeedConfig(BaseModel):
    """
    Settings for the feed pipeline and its collaborators.

    Every field can be overridden by an environment variable with the
    upper-cased field name (e.g. SIMILARITY_THRESHOLD=0.7).
    """
    # Supabase
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None

    # Embedding provider
    openai_api_key: Optional[str] = None
    embedding_provider: Literal["openai", "local"] = "openai"
    embedding_model: str = "text-embedding-ada-002"
    local_embedding_model: str = "BAAI/bge-base-en"
    embedding_dimensions: Optional[int] = Field(default=None, gt=0)
    embedding_timeout_seconds: float = Field(default=5.0, gt=0)

    # Vector matcher
    vector_backend: Literal["supabase", "qdrant"] = "supabase"
    qdrant_host: str = "localhost"
    qdrant_port: int = 6333
    qdrant_api_key: Optional[str] = None
    qdrant_collection: str = "products"

    # Feed policy
    similarity_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    match_limit: int = Field(default=20, gt=0)
    supplement_floor: int = Field(default=10, ge=0)
    brand_limit: int = Field(default=5, gt=0)
    supplement_limit: int = Field(default=10, gt=0)
    referral_limit: int = Field(default=10, ge=0)
    page_size: int = Field(default=20, gt=0)
    history_limit: int = Field(default=10, gt=0)
    generic_query: str = "trending items"
    max_query_chars: int = Field(default=256, gt=0)

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "FeedConfig":
        values = {}
        for name in cls.model_fields:
            raw = os.getenv(name.upper())
            if raw not in (None, ""):
                values[name] = raw
        return cls(**values)


@lru_cache()
def get_feed_config() -> FeedConfig:
    return FeedConfig.from_env()
