import logging
import os
from functools import lru_cache
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from feed_service.config import get_feed_config
from feed_service.exceptions import AuthenticationError, DataStoreError

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = "id, name, brand, price, source_url, img_url, tags, created_at"
REFERRAL_COLUMNS = """
    *,
    sender:users!friend_recs_sender_id_fkey(id, name, email, avatar_url),
    product:products!friend_recs_product_id_fkey(id, name, brand, price, img_url, source_url, tags)
"""


class SupabaseClient:
    """
    Thin wrapper over the Supabase tables used by the feed.

    Every method raises DataStoreError when the query fails; callers decide
    whether that failure is fatal.
    """

    def __init__(self, url: Optional[str] = None, key: Optional[str] = None):
        self.url = url or os.getenv("SUPABASE_URL")
        self.key = key or os.getenv("SUPABASE_ANON_KEY")

        if not self.url or not self.key:
            raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set in environment variables")

        self.client: Client = create_client(self.url, self.key)

    def get_auth_user_id(self, access_token: str) -> str:
        """
        Resolve a Supabase Auth access token to the user's id
        """
        try:
            response = self.client.auth.get_user(access_token)
        except Exception as e:
            logger.warning(f"Supabase rejected access token: {str(e)}")
            raise AuthenticationError("Invalid or expired access token") from e

        if not response or not response.user:
            raise AuthenticationError("Not authenticated")
        return response.user.id

    def get_user_preferences(self, user_id: str) -> Optional[List[str]]:
        """
        Fetch the raw preferences column for a user.
        Returns None if the user row does not exist.
        """
        try:
            response = self.client.table("users").select("preferences").eq("id", user_id).limit(1).execute()
        except Exception as e:
            logger.error(f"Error fetching preferences for user {user_id}: {str(e)}")
            raise DataStoreError(f"Failed to fetch preferences for user {user_id}", step="fetch_preferences", cause=e) from e

        if not response.data:
            return None
        return response.data[0].get("preferences") or []

    def update_user_preferences(self, user_id: str, preferences: List[str]) -> bool:
        try:
            response = self.client.table("users").update({
                "preferences": preferences
            }).eq("id", user_id).execute()
        except Exception as e:
            logger.error(f"Error updating preferences for user {user_id}: {str(e)}")
            raise DataStoreError(f"Failed to update preferences for user {user_id}", step="update_preferences", cause=e) from e

        if not response.data:
            raise DataStoreError(f"No user row updated for {user_id}", step="update_preferences")
        return True

    def match_products(self, query_embedding: List[float],
                       match_threshold: float,
                       match_count: int) -> List[Dict[str, Any]]:
        """
        Vector similarity search through the match_products RPC (pgvector)
        """
        try:
            response = self.client.rpc("match_products", {
                "query_embedding": query_embedding,
                "match_threshold": match_threshold,
                "match_count": match_count,
            }).execute()
        except Exception as e:
            logger.error(f"Error in match_products RPC: {str(e)}")
            raise DataStoreError("match_products RPC failed", step="match_products", cause=e) from e

        return response.data or []

    def get_products_by_brand(self, brand: str, limit: int = 20, offset: int = 0) -> List[Dict[str, Any]]:
        try:
            response = (
                self.client.table("products")
                .select(PRODUCT_COLUMNS)
                .eq("brand", brand)
                .order("created_at", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching products for brand {brand}: {str(e)}")
            raise DataStoreError(f"Failed to fetch products for brand {brand}", step="products_by_brand", cause=e) from e

        return response.data or []

    def search_products(self, min_price: Optional[float] = None,
                        max_price: Optional[float] = None,
                        limit: int = 20, offset: int = 0) -> List[Dict[str, Any]]:
        try:
            query = self.client.table("products").select(PRODUCT_COLUMNS)
            if min_price is not None:
                query = query.gte("price", min_price)
            if max_price is not None:
                query = query.lte("price", max_price)
            response = (
                query.order("created_at", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error searching products (min={min_price}, max={max_price}): {str(e)}")
            raise DataStoreError("Filtered product search failed", step="products_by_filter", cause=e) from e

        return response.data or []

    def get_recent_products(self, limit: int = 20, offset: int = 0) -> List[Dict[str, Any]]:
        try:
            response = (
                self.client.table("products")
                .select(PRODUCT_COLUMNS)
                .order("created_at", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching recent products: {str(e)}")
            raise DataStoreError("Failed to fetch recent products", step="recent_products", cause=e) from e

        return response.data or []

    def get_received_referrals(self, user_id: str, limit: int = 20, offset: int = 0) -> List[Dict[str, Any]]:
        """
        Referrals addressed to user_id, newest first, with sender and product joined
        """
        try:
            response = (
                self.client.table("friend_recs")
                .select(REFERRAL_COLUMNS)
                .eq("receiver_id", user_id)
                .order("created_at", desc=True)
                .range(offset, offset + limit - 1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error fetching referrals for user {user_id}: {str(e)}")
            raise DataStoreError(f"Failed to fetch referrals for user {user_id}", step="fetch_referrals", cause=e) from e

        return response.data or []


@lru_cache()
def get_supabase_client() -> SupabaseClient:
    config = get_feed_config()
    return SupabaseClient(config.supabase_url, config.supabase_anon_key)
