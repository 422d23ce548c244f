"""Tests for merging referrals, semantic matches and fallback products."""

from factories import product_row, referral_row

from feed_service.models.feed_models import FeedItem, FeedSource
from feed_service.models.product_models import Product, parse_products
from feed_service.models.referral_models import SocialReferral
from feed_service.services.feed_merge import (
    dedupe_feed_items,
    merge_feed,
    products_to_feed_items,
    referral_to_feed_item,
)


def _referrals(*rows):
    return [SocialReferral.model_validate(row) for row in rows]


def _products(*ids):
    return parse_products([product_row(i) for i in ids])


def _ids(items):
    return [item.product.id for item in items]


def test_referral_item_carries_sender_and_message():
    referral = _referrals(referral_row("r1", "p1", sender_name="Bea", message="You need these"))[0]

    item = referral_to_feed_item(referral)

    assert item.source == FeedSource.SOCIAL
    assert item.provenance == "social: shared by Bea"
    assert item.shared_by == "Bea"
    assert item.message == "You need these"
    assert item.referral_id == "r1"
    assert item.product.id == "p1"


def test_product_items_are_labelled_by_source():
    semantic = products_to_feed_items(_products("a"), FeedSource.SEMANTIC)
    fallback = products_to_feed_items(_products("b"), FeedSource.FALLBACK)

    assert semantic[0].provenance == "semantic match"
    assert fallback[0].provenance == "fallback"


def test_dedupe_keeps_first_occurrence():
    items = [
        FeedItem(product=Product(id="x", name="first"), source=FeedSource.SOCIAL, provenance="social"),
        FeedItem(product=Product(id="y", name="other"), source=FeedSource.SEMANTIC, provenance="semantic match"),
        FeedItem(product=Product(id="x", name="second"), source=FeedSource.SEMANTIC, provenance="semantic match"),
    ]

    unique = dedupe_feed_items(items)

    assert _ids(unique) == ["x", "y"]
    assert unique[0].product.name == "first"


def test_dedupe_drops_items_without_products():
    items = [
        FeedItem(product=None, source=FeedSource.SOCIAL, provenance="social"),
        FeedItem(product=Product(id="z", name="kept"), source=FeedSource.FALLBACK, provenance="fallback"),
    ]

    assert _ids(dedupe_feed_items(items)) == ["z"]


def test_merge_orders_social_then_semantic_then_fallback():
    items = merge_feed(
        referrals=_referrals(referral_row("r1", "p1")),
        semantic=_products("s1", "s2"),
        supplement=_products("f1"),
        page_size=20,
    )

    assert _ids(items) == ["p1", "s1", "s2", "f1"]
    assert [item.source for item in items] == [
        FeedSource.SOCIAL,
        FeedSource.SEMANTIC,
        FeedSource.SEMANTIC,
        FeedSource.FALLBACK,
    ]


def test_merge_prefers_social_copy_of_duplicate_product():
    items = merge_feed(
        referrals=_referrals(referral_row("r1", "shared")),
        semantic=_products("shared", "s1"),
        supplement=_products("s1", "f1"),
        page_size=20,
    )

    assert _ids(items) == ["shared", "s1", "f1"]
    assert items[0].source == FeedSource.SOCIAL
    assert items[1].source == FeedSource.SEMANTIC


def test_merge_skips_referrals_whose_product_was_removed():
    items = merge_feed(
        referrals=_referrals(referral_row("r1", None), referral_row("r2", "p2")),
        semantic=[],
        supplement=[],
        page_size=20,
    )

    assert _ids(items) == ["p2"]


def test_merge_truncates_non_social_items_to_page_size():
    items = merge_feed(
        referrals=_referrals(referral_row("r1", "p1"), referral_row("r2", "p2")),
        semantic=_products(*[f"s{i}" for i in range(10)]),
        supplement=_products(*[f"f{i}" for i in range(10)]),
        page_size=5,
    )

    assert _ids(items) == ["p1", "p2", "s0", "s1", "s2"]


def test_merge_never_truncates_social_items():
    referrals = _referrals(*[referral_row(f"r{i}", f"p{i}") for i in range(4)])

    items = merge_feed(referrals, _products("s1"), [], page_size=3)

    assert _ids(items) == ["p0", "p1", "p2", "p3"]


def test_merge_with_nothing_is_empty():
    assert merge_feed([], [], [], page_size=20) == []
