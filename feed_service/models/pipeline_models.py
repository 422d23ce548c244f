import operator
from typing import Annotated, List, Optional

from typing_extensions import TypedDict

from feed_service.models.feed_models import FeedItem
from feed_service.models.product_models import Product
from feed_service.models.referral_models import SocialReferral
from feed_service.models.user_profile_models import PreferenceProfile


class FeedState(TypedDict, total=False):
    """
    State object for the feed aggregation pipeline
    Compatible with LangGraph's state handling
    """
    # Input
    user_id: str

    # Pipeline data
    profile: PreferenceProfile
    profile_found: bool
    referrals: List[SocialReferral]
    query: str
    is_generic_query: bool
    embedding: Optional[List[float]]
    semantic_products: List[Product]
    supplement_products: List[Product]
    items: List[FeedItem]

    # Failed steps, appended to by parallel branches
    errors: Annotated[List[str], operator.add]
