"""Shared fixtures: a mocked Supabase store and embedding provider wired
into the real feed services."""

from unittest.mock import MagicMock

import pytest

from feed_service.config import FeedConfig
from feed_service.database.supabase_client import SupabaseClient
from feed_service.pipelines.context import FeedServices
from feed_service.pipelines.orchestrator import FeedOrchestrator
from feed_service.services.embedding_service import EmbeddingProvider
from feed_service.services.referral_service import ReferralService
from feed_service.services.retrieval_service import ProductRetrievalService
from feed_service.services.user_preferences_service import UserPreferencesService


@pytest.fixture
def feed_config():
    return FeedConfig(supabase_url="http://localhost:54321", supabase_anon_key="test-key")


@pytest.fixture
def store():
    """SupabaseClient double with an empty catalogue and no user rows."""
    store = MagicMock(spec=SupabaseClient)
    store.get_user_preferences.return_value = None
    store.update_user_preferences.return_value = True
    store.get_received_referrals.return_value = []
    store.match_products.return_value = []
    store.get_products_by_brand.return_value = []
    store.search_products.return_value = []
    store.get_recent_products.return_value = []
    return store


@pytest.fixture
def embedder():
    embedder = MagicMock(spec=EmbeddingProvider)
    embedder.embed.return_value = [0.1, 0.2, 0.3]
    return embedder


@pytest.fixture
def services(store, embedder, feed_config):
    return FeedServices(
        preferences=UserPreferencesService(
            store,
            history_limit=feed_config.history_limit,
            max_query_chars=feed_config.max_query_chars,
        ),
        referrals=ReferralService(store),
        embeddings=embedder,
        retrieval=ProductRetrievalService(store),
        config=feed_config,
    )


@pytest.fixture
def orchestrator(services):
    return FeedOrchestrator(services)
