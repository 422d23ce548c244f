import logging
import threading
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, List, Optional

import numpy as np
from openai import OpenAI

from feed_service.config import FeedConfig, get_feed_config
from feed_service.exceptions import EmbeddingError

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "text-embedding-ada-002"
DEFAULT_LOCAL_MODEL = "BAAI/bge-base-en"


class EmbeddingProvider(ABC):
    """
    Maps text to a fixed-length vector.

    Subclasses implement _embed; embed() validates the result and wraps any
    provider failure in EmbeddingError.
    """
    name = "embedding"

    def __init__(self, dimensions: Optional[int] = None):
        self.dimensions = dimensions

    def embed(self, text: str) -> List[float]:
        if not text or not text.strip():
            raise EmbeddingError("Cannot embed empty text", step="embed_query")

        try:
            raw = self._embed(text.strip())
        except EmbeddingError:
            raise
        except Exception as e:
            logger.error(f"{self.name} embedding request failed: {str(e)}")
            raise EmbeddingError(f"{self.name} embedding request failed", step="embed_query", cause=e) from e

        return self._validate(raw)

    @abstractmethod
    def _embed(self, text: str) -> Any:
        """Provider call returning the raw vector for stripped, non-empty text."""

    def _validate(self, raw: Any) -> List[float]:
        try:
            vector = np.asarray(raw, dtype=float)
        except (TypeError, ValueError) as e:
            raise EmbeddingError("Embedding is not numeric", step="embed_query", cause=e) from e

        if vector.ndim != 1 or vector.size == 0:
            raise EmbeddingError(f"Embedding has invalid shape {vector.shape}", step="embed_query")
        if not np.all(np.isfinite(vector)):
            raise EmbeddingError("Embedding contains non-finite values", step="embed_query")
        if self.dimensions and vector.size != self.dimensions:
            raise EmbeddingError(
                f"Embedding has dimension {vector.size}, expected {self.dimensions}",
                step="embed_query",
            )
        return vector.tolist()


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embeddings from the OpenAI API. No retries; the call is bounded by timeout."""
    name = "openai"

    def __init__(self, api_key: Optional[str] = None,
                 model: str = DEFAULT_OPENAI_MODEL,
                 timeout: float = 5.0,
                 dimensions: Optional[int] = None):
        super().__init__(dimensions)
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client: Optional[OpenAI] = None
        self._lock = threading.Lock()

    def _get_client(self) -> OpenAI:
        with self._lock:
            if self._client is None:
                # api_key=None lets the SDK read OPENAI_API_KEY
                self._client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
            return self._client

    def _embed(self, text: str) -> List[float]:
        response = self._get_client().embeddings.create(model=self.model, input=text)
        return response.data[0].embedding


class LocalEmbeddingProvider(EmbeddingProvider):
    """Embeddings from a sentence-transformers model loaded on first use."""
    name = "local"

    def __init__(self, model_name: str = DEFAULT_LOCAL_MODEL, dimensions: Optional[int] = None):
        super().__init__(dimensions)
        self.model_name = model_name
        self._model = None
        self._lock = threading.Lock()

    def _get_model(self):
        with self._lock:
            if self._model is None:
                from sentence_transformers import SentenceTransformer

                self._model = SentenceTransformer(self.model_name)
                logger.info(f"Loaded embedding model {self.model_name}")
            return self._model

    def _embed(self, text: str) -> Any:
        return self._get_model().encode(text, normalize_embeddings=True)


def create_embedding_provider(config: FeedConfig) -> EmbeddingProvider:
    if config.embedding_provider == "local":
        return LocalEmbeddingProvider(
            model_name=config.local_embedding_model,
            dimensions=config.embedding_dimensions,
        )
    return OpenAIEmbeddingProvider(
        api_key=config.openai_api_key,
        model=config.embedding_model,
        timeout=config.embedding_timeout_seconds,
        dimensions=config.embedding_dimensions,
    )


@lru_cache()
def get_embedding_provider() -> EmbeddingProvider:
    return create_embedding_provider(get_feed_config())
