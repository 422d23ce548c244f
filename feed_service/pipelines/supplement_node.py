from typing import Any, Dict, TYPE_CHECKING
import logging

from langchain_core.runnables import RunnableConfig

from feed_service.models.user_profile_models import PreferenceProfile
from feed_service.pipelines.context import get_services, with_errors
from feed_service.services.step_outcome import run_step

if TYPE_CHECKING:
    from feed_service.models.pipeline_models import FeedState

logger = logging.getLogger(__name__)


def supplement_node(state: 'FeedState', config: RunnableConfig) -> Dict[str, Any]:
    """
    Fill out sparse semantic results with filtered products:
    favorite brands first, then the stored price range, then recent products
    """
    services = get_services(config)
    cfg = services.config
    retrieval = services.retrieval
    user_id = state["user_id"]
    semantic_count = len(state.get("semantic_products") or [])

    if semantic_count >= cfg.supplement_floor:
        return {"supplement_products": []}

    profile = state.get("profile") or PreferenceProfile.empty()
    logger.info(f"Supplementing feed for {user_id}: {semantic_count} semantic results below floor {cfg.supplement_floor}")

    if profile.favorite_brands:
        # Each brand is fetched independently so one failing brand keeps the rest
        outcomes = [
            run_step(
                "supplement_by_brand",
                user_id,
                lambda brand=brand: retrieval.by_brand(brand, cfg.brand_limit, 0),
                default=[],
            )
            for brand in profile.favorite_brands
        ]
        products = [product for outcome in outcomes for product in outcome.value]
        return with_errors({"supplement_products": products}, *outcomes)

    price_range = profile.price_range
    if price_range is not None and price_range.has_bounds:
        outcome = run_step(
            "supplement_by_price",
            user_id,
            lambda: retrieval.by_filter(price_range.min, price_range.max, cfg.supplement_limit, 0),
            default=[],
        )
    else:
        outcome = run_step(
            "supplement_recent",
            user_id,
            lambda: retrieval.recent(cfg.supplement_limit, 0),
            default=[],
        )

    return with_errors({"supplement_products": outcome.value}, outcome)
