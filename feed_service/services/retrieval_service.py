from typing import List, Optional
import logging

from feed_service.database.qdrant_client import QdrantVectorClient
from feed_service.database.supabase_client import SupabaseClient
from feed_service.exceptions import InvalidFilterError
from feed_service.models.product_models import Product, parse_products

logger = logging.getLogger(__name__)


class ProductRetrievalService:
    """
    Product lookups for the feed: vector similarity matching plus the
    structured filters used to supplement sparse semantic results.

    Matching runs against the Supabase match_products RPC unless a Qdrant
    client is supplied.
    """

    def __init__(self, client: SupabaseClient, vector_client: Optional[QdrantVectorClient] = None):
        self.client = client
        self.vector_client = vector_client
        backend = "qdrant" if vector_client is not None else "supabase"
        logger.info(f"ProductRetrievalService initialized with {backend} vector backend")

    def match(self, vector: List[float], threshold: float, limit: int) -> List[Product]:
        """
        Products whose embeddings meet threshold, ranked by similarity
        """
        if self.vector_client is not None:
            rows = self.vector_client.vector_similarity_search(
                query_embedding=vector,
                similarity_threshold=threshold,
                limit=limit,
            )
        else:
            rows = self.client.match_products(
                query_embedding=vector,
                match_threshold=threshold,
                match_count=limit,
            )

        products = parse_products(rows)
        products.sort(key=lambda p: p.similarity if p.similarity is not None else 0.0, reverse=True)
        logger.info(f"Vector match returned {len(products)} products (threshold={threshold}, limit={limit})")
        return products[:limit]

    def by_brand(self, brand: str, limit: int, offset: int = 0) -> List[Product]:
        if limit <= 0:
            return []
        return parse_products(self.client.get_products_by_brand(brand, limit, offset))

    def by_filter(self, min_price: Optional[float] = None,
                  max_price: Optional[float] = None,
                  limit: int = 10, offset: int = 0) -> List[Product]:
        if min_price is not None and max_price is not None and min_price > max_price:
            raise InvalidFilterError(
                f"min_price {min_price} is greater than max_price {max_price}",
                details={"min_price": min_price, "max_price": max_price},
            )
        if limit <= 0:
            return []
        return parse_products(self.client.search_products(min_price, max_price, limit, offset))

    def recent(self, limit: int, offset: int = 0) -> List[Product]:
        if limit <= 0:
            return []
        return parse_products(self.client.get_recent_products(limit, offset))
