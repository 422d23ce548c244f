import json
import logging
from typing import List, Optional, Union

from pydantic import ValidationError

from feed_service.database.supabase_client import SupabaseClient
from feed_service.models.user_profile_models import DEFAULT_HISTORY_LIMIT, PreferenceProfile
from feed_service.services.query_compiler import DEFAULT_MAX_QUERY_CHARS, bound_query
from feed_service.services.step_outcome import run_step

logger = logging.getLogger(__name__)


def parse_stored_preferences(raw: Union[List[str], str, None], user_id: str = "") -> PreferenceProfile:
    """
    The preferences column holds JSON split across a list of strings.
    Anything that does not parse is treated as an empty profile; fields that
    fail validation are dropped one by one.
    """
    if not raw:
        return PreferenceProfile.empty()

    text = raw if isinstance(raw, str) else "".join(str(part) for part in raw)
    try:
        data = json.loads(text)
    except ValueError:
        logger.warning(f"Preferences for user {user_id} are not valid JSON, using empty profile")
        return PreferenceProfile.empty()

    if not isinstance(data, dict):
        logger.warning(f"Preferences for user {user_id} are not an object, using empty profile")
        return PreferenceProfile.empty()

    try:
        return PreferenceProfile.model_validate(data)
    except ValidationError as e:
        invalid = {str(err["loc"][0]) for err in e.errors() if err["loc"]}

    # Drop only the fields that failed and keep the rest of the profile
    logger.warning(f"Preferences for user {user_id} have invalid fields {sorted(invalid)}, ignoring them")
    try:
        return PreferenceProfile.model_validate({k: v for k, v in data.items() if k not in invalid})
    except ValidationError as e:
        logger.warning(f"Preferences for user {user_id} failed validation ({e.error_count()} errors), using empty profile")
        return PreferenceProfile.empty()


def serialize_preferences(profile: PreferenceProfile) -> List[str]:
    return [profile.model_dump_json(exclude_none=True)]


class UserPreferencesService:
    """
    Reads and writes a user's preference profile and search history
    """

    def __init__(self, client: SupabaseClient, history_limit: int = DEFAULT_HISTORY_LIMIT,
                 max_query_chars: int = DEFAULT_MAX_QUERY_CHARS):
        self.client = client
        self.history_limit = history_limit
        self.max_query_chars = max_query_chars

    def get_preferences(self, user_id: str) -> Optional[PreferenceProfile]:
        """
        Returns None when the user has no profile row.
        Store failures propagate to the caller.
        """
        raw = self.client.get_user_preferences(user_id)
        if raw is None:
            logger.info(f"No preferences row for user {user_id}")
            return None
        return parse_stored_preferences(raw, user_id)

    def update_preferences(self, user_id: str, profile: PreferenceProfile) -> PreferenceProfile:
        self.client.update_user_preferences(user_id, serialize_preferences(profile))
        return profile

    def record_search(self, user_id: str, profile: PreferenceProfile, query: str) -> bool:
        """
        Append query (deduplicated and length-capped) to the search history
        and persist it. Best-effort: failures are logged and reported as False.
        """
        query = bound_query(query, self.max_query_chars)
        if not query:
            return False
        updated = profile.record_search(query, limit=self.history_limit)
        outcome = run_step(
            "record_search_history",
            user_id,
            lambda: self.update_preferences(user_id, updated),
            default=None,
        )
        if outcome.ok:
            logger.info(f"Recorded search for user {user_id} ({len(updated.search_history)} entries)")
        return outcome.ok
