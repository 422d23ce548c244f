import logging
from typing import Any, Dict, List, Optional

from qdrant_client import QdrantClient

from feed_service.exceptions import VectorMatchError

logger = logging.getLogger(__name__)


class QdrantVectorClient:
    """
    Client for the product embedding collection in Qdrant.
    Product fields are stored in each point's payload.
    """

    def __init__(self, host: str = "localhost", port: int = 6333,
                 api_key: Optional[str] = None,
                 collection_name: str = "products"):
        self.client = None
        self.collection_name = collection_name

        try:
            # Check if host contains protocol (http:// or https://)
            if host.startswith(("http://", "https://")):
                self.client = QdrantClient(url=host, api_key=api_key)
            else:
                self.client = QdrantClient(host=host, port=port, api_key=api_key)

            collections = self.client.get_collections()
            logger.info(f"Connected to Qdrant successfully. Collections: {[c.name for c in collections.collections]}")

        except Exception as e:
            logger.error(f"Failed to connect to Qdrant: {str(e)}")
            self.client = None

    def vector_similarity_search(self, query_embedding: List[float],
                                 similarity_threshold: float = 0.7,
                                 limit: int = 20) -> List[Dict[str, Any]]:
        """
        Products whose vectors score at least similarity_threshold, best first
        """
        if self.client is None:
            raise VectorMatchError("Qdrant client is not connected", step="match_products")

        try:
            response = self.client.query_points(
                collection_name=self.collection_name,
                query=[float(x) for x in query_embedding],
                limit=limit,
                score_threshold=similarity_threshold,
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            logger.error(f"Error in Qdrant vector similarity search: {str(e)}")
            raise VectorMatchError("Qdrant similarity search failed", step="match_products", cause=e) from e

        products = []
        for point in response.points:
            payload = dict(point.payload or {})
            payload.setdefault("id", str(point.id))
            payload["similarity"] = float(point.score)
            products.append(payload)

        logger.info(f"Found {len(products)} similar products in Qdrant")
        return products
