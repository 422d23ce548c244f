from dataclasses import dataclass
from typing import Dict, List

from langchain_core.runnables import RunnableConfig

from feed_service.config import FeedConfig
from feed_service.services.embedding_service import EmbeddingProvider
from feed_service.services.referral_service import ReferralService
from feed_service.services.retrieval_service import ProductRetrievalService
from feed_service.services.step_outcome import StepOutcome
from feed_service.services.user_preferences_service import UserPreferencesService


@dataclass
class FeedServices:
    """Collaborators handed to every pipeline node through the run config"""
    preferences: UserPreferencesService
    referrals: ReferralService
    embeddings: EmbeddingProvider
    retrieval: ProductRetrievalService
    config: FeedConfig


def get_services(config: RunnableConfig) -> FeedServices:
    return config["configurable"]["services"]


def with_errors(update: Dict, *outcomes: StepOutcome) -> Dict:
    errors: List[str] = [o.error for o in outcomes if not o.ok and o.error]
    if errors:
        update["errors"] = errors
    return update
