# Product models
from .product_models import Product, parse_products

# User preference models
from .user_profile_models import PreferenceProfile, PriceRange

# Referral models
from .referral_models import ReferralUser, SocialReferral

# Feed and pipeline models
from .feed_models import FeedItem, FeedResult, FeedSource
from .pipeline_models import FeedState

# Request/Response models
from .request_models import *
from .response_models import *

__all__ = [
    "Product",
    "parse_products",
    "PreferenceProfile",
    "PriceRange",
    "ReferralUser",
    "SocialReferral",
    "FeedItem",
    "FeedResult",
    "FeedSource",
    "FeedState",
    "EmbedRequest",
    "EmbedResponse",
    "HealthResponse",
]
