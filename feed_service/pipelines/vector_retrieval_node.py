from typing import Any, Dict, TYPE_CHECKING
import logging

from langchain_core.runnables import RunnableConfig

from feed_service.pipelines.context import get_services, with_errors
from feed_service.services.step_outcome import run_step

if TYPE_CHECKING:
    from feed_service.models.pipeline_models import FeedState

logger = logging.getLogger(__name__)


def embed_query_node(state: 'FeedState', config: RunnableConfig) -> Dict[str, Any]:
    """
    Embed the compiled query. On failure or timeout the embedding is None
    and semantic matching is skipped.
    """
    services = get_services(config)
    user_id = state["user_id"]
    query = state.get("query", "")

    outcome = run_step(
        "embed_query",
        user_id,
        lambda: services.embeddings.embed(query),
        default=None,
        timeout=services.config.embedding_timeout_seconds,
    )

    if outcome.value is not None:
        logger.info(f"Query embedded for {user_id}: dim={len(outcome.value)}")

    return with_errors({"embedding": outcome.value}, outcome)


def match_products_node(state: 'FeedState', config: RunnableConfig) -> Dict[str, Any]:
    """
    Vector similarity search for the query embedding
    """
    services = get_services(config)
    user_id = state["user_id"]
    embedding = state.get("embedding")

    if not embedding:
        logger.info(f"No query embedding for {user_id}, skipping vector match")
        return {"semantic_products": []}

    outcome = run_step(
        "match_products",
        user_id,
        lambda: services.retrieval.match(
            embedding,
            services.config.similarity_threshold,
            services.config.match_limit,
        ),
        default=[],
    )

    logger.info(f"Vector match for {user_id}: {len(outcome.value)} products")

    return with_errors({"semantic_products": outcome.value}, outcome)
