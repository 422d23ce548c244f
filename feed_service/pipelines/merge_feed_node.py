from typing import Any, Dict, TYPE_CHECKING
import logging

from langchain_core.runnables import RunnableConfig

from feed_service.pipelines.context import get_services
from feed_service.services.feed_merge import merge_feed

if TYPE_CHECKING:
    from feed_service.models.pipeline_models import FeedState

logger = logging.getLogger(__name__)


def merge_feed_node(state: 'FeedState', config: RunnableConfig) -> Dict[str, Any]:
    """
    Merge referrals, semantic matches and supplement products into one page
    """
    services = get_services(config)

    items = merge_feed(
        referrals=state.get("referrals") or [],
        semantic=state.get("semantic_products") or [],
        supplement=state.get("supplement_products") or [],
        page_size=services.config.page_size,
    )

    logger.info(f"Merged feed for {state['user_id']}: {len(items)} items")
    return {"items": items}
