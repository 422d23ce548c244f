from fastapi import APIRouter, BackgroundTasks, Depends
import logging

from feed_service.api.auth import require_user_id
from feed_service.models.feed_models import FeedResult
from feed_service.pipelines.orchestrator import FeedOrchestrator, get_feed_orchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=FeedResult)
def get_feed(
    background_tasks: BackgroundTasks,
    user_id: str = Depends(require_user_id),
    orchestrator: FeedOrchestrator = Depends(get_feed_orchestrator),
):
    """
    Personalized product feed for the authenticated user.

    Always 200 once the user is identified; upstream failures only shrink
    the feed. The search-history write runs after the response is sent.
    """
    return orchestrator.generate_feed(user_id, schedule=background_tasks.add_task)
