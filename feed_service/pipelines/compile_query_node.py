from typing import Any, Dict, TYPE_CHECKING
import logging

from langchain_core.runnables import RunnableConfig

from feed_service.models.user_profile_models import PreferenceProfile
from feed_service.pipelines.context import get_services
from feed_service.services.query_compiler import compile_query

if TYPE_CHECKING:
    from feed_service.models.pipeline_models import FeedState

logger = logging.getLogger(__name__)


def compile_query_node(state: 'FeedState', config: RunnableConfig) -> Dict[str, Any]:
    """
    Compile the semantic query, substituting the generic query for users
    without usable preferences
    """
    services = get_services(config)
    profile = state.get("profile") or PreferenceProfile.empty()

    query = "" if profile.is_empty else compile_query(profile, services.config.max_query_chars)
    if query.strip():
        return {"query": query, "is_generic_query": False}

    logger.info(f"No personalization for user {state['user_id']}, using generic query")
    return {"query": services.config.generic_query, "is_generic_query": True}
