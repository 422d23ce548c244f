from typing import List
import logging

from pydantic import ValidationError

from feed_service.database.supabase_client import SupabaseClient
from feed_service.models.referral_models import SocialReferral

logger = logging.getLogger(__name__)


class ReferralService:
    """
    Reads the referral inbox: products other users have shared with a user
    """

    def __init__(self, client: SupabaseClient):
        self.client = client

    def received_for(self, user_id: str, limit: int = 10, offset: int = 0) -> List[SocialReferral]:
        """
        Referrals addressed to user_id, most recent first
        """
        if limit <= 0:
            return []

        rows = self.client.get_received_referrals(user_id, limit, offset)

        referrals = []
        for row in rows:
            try:
                referrals.append(SocialReferral.model_validate(row))
            except ValidationError as e:
                logger.warning(f"Skipping malformed referral {row.get('id')} for user {user_id}: {e.error_count()} validation errors")

        logger.info(f"Fetched {len(referrals)} referrals for user {user_id}")
        return referrals
