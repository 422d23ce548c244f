"""
Merging of social, semantic and fallback results into one feed page.
"""
from typing import Iterable, List

from feed_service.models.feed_models import FeedItem, FeedSource
from feed_service.models.product_models import Product
from feed_service.models.referral_models import SocialReferral

SEMANTIC_PROVENANCE = "semantic match"
FALLBACK_PROVENANCE = "fallback"


def referral_to_feed_item(referral: SocialReferral) -> FeedItem:
    sender = referral.sender_display_name
    return FeedItem(
        product=referral.product,
        source=FeedSource.SOCIAL,
        provenance=f"social: shared by {sender}",
        referral_id=referral.id,
        shared_by=sender,
        message=referral.message,
    )


def products_to_feed_items(products: Iterable[Product], source: FeedSource) -> List[FeedItem]:
    provenance = SEMANTIC_PROVENANCE if source == FeedSource.SEMANTIC else FALLBACK_PROVENANCE
    return [FeedItem(product=product, source=source, provenance=provenance) for product in products]


def dedupe_feed_items(items: Iterable[FeedItem]) -> List[FeedItem]:
    """
    Keep the first item for each product id, preserving order.
    Items without a product (or product id) are dropped.
    """
    seen = set()
    unique = []
    for item in items:
        if item.product is None or not item.product.id:
            continue
        if item.product.id in seen:
            continue
        seen.add(item.product.id)
        unique.append(item)
    return unique


def merge_feed(referrals: Iterable[SocialReferral],
               semantic: Iterable[Product],
               supplement: Iterable[Product],
               page_size: int) -> List[FeedItem]:
    """
    Social referrals first, then semantic matches, then fallback products.

    Duplicates keep their highest-priority occurrence. Social items are never
    truncated; the rest of the page is filled up to page_size.
    """
    candidates = [
        *(referral_to_feed_item(r) for r in referrals),
        *products_to_feed_items(semantic, FeedSource.SEMANTIC),
        *products_to_feed_items(supplement, FeedSource.FALLBACK),
    ]
    unique = dedupe_feed_items(candidates)

    social = [item for item in unique if item.source == FeedSource.SOCIAL]
    others = [item for item in unique if item.source != FeedSource.SOCIAL]
    return social + others[:max(page_size - len(social), 0)]
