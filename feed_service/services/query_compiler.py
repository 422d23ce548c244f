"""
Builds the semantic search query for a preference profile.
"""
from typing import Optional

from feed_service.models.user_profile_models import PreferenceProfile

RECENT_SEARCH_COUNT = 3
DEFAULT_MAX_QUERY_CHARS = 256

BUDGET_TIER = "budget affordable"
MID_RANGE_TIER = "mid-range quality"
PREMIUM_TIER = "premium luxury"


def price_tier(max_price: Optional[float]) -> str:
    """Coarse price keyword for an upper price bound, empty if there is none."""
    if max_price is None:
        return ""
    if max_price < 100:
        return BUDGET_TIER
    if max_price < 500:
        return MID_RANGE_TIER
    return PREMIUM_TIER


def bound_query(text: str, max_chars: int = DEFAULT_MAX_QUERY_CHARS) -> str:
    """
    Drop repeated words (case-insensitive, first occurrence wins) and cut
    the result at a word boundary so it is at most max_chars long.
    Recorded searches are compiled back into later queries.
    """
    seen = set()
    words = []
    length = 0
    for word in text.split():
        key = word.casefold()
        if key in seen:
            continue
        added = len(word) if not words else len(word) + 1
        if length + added > max_chars:
            break
        seen.add(key)
        words.append(word)
        length += added
    return " ".join(words)


def compile_query(profile: PreferenceProfile, max_chars: int = DEFAULT_MAX_QUERY_CHARS) -> str:
    """
    Concatenate favorite brands, the price tier and the most recent searches.

    Returns "" when the profile has nothing to personalize with.
    """
    parts = []

    if profile.favorite_brands:
        parts.append(" ".join(profile.favorite_brands))

    max_price = profile.price_range.max if profile.price_range else None
    tier = price_tier(max_price)
    if tier:
        parts.append(tier)

    recent_searches = [s.strip() for s in profile.search_history[-RECENT_SEARCH_COUNT:] if s and s.strip()]
    if recent_searches:
        parts.append(" ".join(recent_searches))

    return bound_query(" ".join(parts), max_chars)
