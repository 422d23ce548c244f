from typing import Any, Dict, TYPE_CHECKING
import logging

from langchain_core.runnables import RunnableConfig

from feed_service.models.user_profile_models import PreferenceProfile
from feed_service.pipelines.context import get_services, with_errors
from feed_service.services.step_outcome import run_step

if TYPE_CHECKING:
    from feed_service.models.pipeline_models import FeedState

logger = logging.getLogger(__name__)


def fetch_profile_node(state: 'FeedState', config: RunnableConfig) -> Dict[str, Any]:
    """
    Fetch the user's preference profile. A missing or unreadable profile
    becomes the empty profile.
    """
    services = get_services(config)
    user_id = state["user_id"]

    outcome = run_step(
        "fetch_preferences",
        user_id,
        lambda: services.preferences.get_preferences(user_id),
        default=None,
    )
    profile = outcome.value

    logger.info(f"Profile fetched for {user_id}: found={profile is not None}")

    return with_errors({
        "profile": profile if profile is not None else PreferenceProfile.empty(),
        "profile_found": profile is not None,
    }, outcome)


def fetch_referrals_node(state: 'FeedState', config: RunnableConfig) -> Dict[str, Any]:
    """
    Fetch pending referrals sent to the user, newest first
    """
    services = get_services(config)
    user_id = state["user_id"]

    outcome = run_step(
        "fetch_referrals",
        user_id,
        lambda: services.referrals.received_for(user_id, services.config.referral_limit, 0),
        default=[],
    )

    logger.info(f"Referrals fetched for {user_id}: {len(outcome.value)}")

    return with_errors({"referrals": outcome.value}, outcome)
