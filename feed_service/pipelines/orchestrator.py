from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Callable, Dict, Optional
import logging

from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, START, StateGraph
from langsmith import traceable

from feed_service.config import FeedConfig, get_feed_config
from feed_service.database.qdrant_client import QdrantVectorClient
from feed_service.database.supabase_client import get_supabase_client
from feed_service.models.feed_models import FeedResult
from feed_service.models.pipeline_models import FeedState
from feed_service.pipelines.compile_query_node import compile_query_node
from feed_service.pipelines.context import FeedServices
from feed_service.pipelines.fetch_user_data_node import fetch_profile_node, fetch_referrals_node
from feed_service.pipelines.merge_feed_node import merge_feed_node
from feed_service.pipelines.supplement_node import supplement_node
from feed_service.pipelines.vector_retrieval_node import embed_query_node, match_products_node
from feed_service.services.embedding_service import get_embedding_provider
from feed_service.services.referral_service import ReferralService
from feed_service.services.retrieval_service import ProductRetrievalService
from feed_service.services.user_preferences_service import UserPreferencesService

logger = logging.getLogger(__name__)

# Receives (fn, *args); FastAPI's BackgroundTasks.add_task fits
Scheduler = Callable[..., Any]

SEQUENTIAL_NODES = (
    fetch_profile_node,
    fetch_referrals_node,
    compile_query_node,
    embed_query_node,
    match_products_node,
    supplement_node,
    merge_feed_node,
)


class FeedOrchestrator:
    """
    Orchestrator for the product discovery feed:
    1. Fetch preference profile and social referrals (parallel branches)
    2. Compile the semantic query (generic query if no preferences)
    3. Embed the query and run the vector match
    4. Supplement sparse results with brand / price / recent products
    5. Merge referrals first, dedupe, truncate to a page
    6. Record the query in search history after the response
    """

    def __init__(self, services: FeedServices):
        self.services = services
        self.graph = None
        self._build_graph()

    def _build_graph(self):
        """Build the feed LangGraph workflow"""
        try:
            workflow = StateGraph(FeedState)

            workflow.add_node("fetch_profile", fetch_profile_node)
            workflow.add_node("fetch_referrals", fetch_referrals_node)
            workflow.add_node("compile_query", compile_query_node)
            workflow.add_node("embed_query", embed_query_node)
            workflow.add_node("match_products", match_products_node)
            workflow.add_node("supplement", supplement_node)
            workflow.add_node("merge_feed", merge_feed_node)

            # Referrals run alongside the whole query chain and join at merge
            workflow.add_edge(START, "fetch_profile")
            workflow.add_edge(START, "fetch_referrals")
            workflow.add_edge("fetch_profile", "compile_query")
            workflow.add_edge("compile_query", "embed_query")
            workflow.add_edge("embed_query", "match_products")
            workflow.add_edge("match_products", "supplement")
            workflow.add_edge(["supplement", "fetch_referrals"], "merge_feed")
            workflow.add_edge("merge_feed", END)

            self.graph = workflow.compile()
            logger.info("Feed LangGraph workflow compiled successfully")

        except Exception as e:
            logger.error(f"Error building feed LangGraph workflow: {str(e)}")
            self.graph = None

    def _run_config(self) -> RunnableConfig:
        return {"configurable": {"services": self.services}}

    def _run_sequential(self, state: Dict[str, Any], run_config: RunnableConfig) -> Dict[str, Any]:
        """Same nodes, one after another, when the graph is unavailable"""
        for node in SEQUENTIAL_NODES:
            update = dict(node(state, run_config))
            errors = update.pop("errors", [])
            state.update(update)
            state["errors"] = state.get("errors", []) + errors
        return state

    @traceable(name="feed_pipeline")
    def generate_feed(self, user_id: str, schedule: Optional[Scheduler] = None) -> FeedResult:
        """
        Main entry point for building a user's feed.

        Never raises: every collaborator failure degrades the feed, and an
        unexpected pipeline error yields an empty result.
        """
        start_time = datetime.now(timezone.utc)
        initial_state: FeedState = {
            "user_id": user_id,
            "errors": [],
        }
        run_config = self._run_config()

        try:
            if self.graph:
                result = self.graph.invoke(initial_state, config=run_config)
            else:
                result = self._run_sequential(dict(initial_state), run_config)
        except Exception as e:
            logger.error(f"Error in feed pipeline for user {user_id}: {str(e)}", exc_info=True)
            return FeedResult(items=[], query="")

        self._schedule_history_update(user_id, result, schedule)

        execution_time = (datetime.now(timezone.utc) - start_time).total_seconds()
        errors = result.get("errors") or []
        logger.info(
            f"Feed pipeline completed for user {user_id} in {execution_time:.2f}s: "
            f"{len(result.get('items') or [])} items, {len(errors)} degraded steps",
            extra={"user_id": user_id, "degraded_steps": errors},
        )

        return FeedResult(items=result.get("items") or [], query=result.get("query", ""))

    def _schedule_history_update(self, user_id: str, result: Dict[str, Any],
                                 schedule: Optional[Scheduler]) -> None:
        """
        Record a personalized query in the user's search history. Runs through
        schedule (after the response) when given, otherwise inline.
        """
        query = result.get("query", "")
        if result.get("is_generic_query", True) or not query or not result.get("profile_found"):
            return

        record = self.services.preferences.record_search
        profile = result["profile"]
        if schedule is None:
            record(user_id, profile, query)
        else:
            schedule(record, user_id, profile, query)


def build_feed_services(config: FeedConfig) -> FeedServices:
    client = get_supabase_client()

    vector_client = None
    if config.vector_backend == "qdrant":
        vector_client = QdrantVectorClient(
            host=config.qdrant_host,
            port=config.qdrant_port,
            api_key=config.qdrant_api_key,
            collection_name=config.qdrant_collection,
        )

    return FeedServices(
        preferences=UserPreferencesService(
            client,
            history_limit=config.history_limit,
            max_query_chars=config.max_query_chars,
        ),
        referrals=ReferralService(client),
        embeddings=get_embedding_provider(),
        retrieval=ProductRetrievalService(client, vector_client),
        config=config,
    )


@lru_cache()
def get_feed_orchestrator() -> FeedOrchestrator:
    return FeedOrchestrator(build_feed_services(get_feed_config()))
