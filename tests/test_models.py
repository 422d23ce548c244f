"""Tests for the product, preference and referral models."""

import pytest

from factories import product_row, referral_row

from feed_service.models.product_models import Product, parse_products
from feed_service.models.referral_models import MAX_MESSAGE_LENGTH, SocialReferral
from feed_service.models.user_profile_models import PreferenceProfile, PriceRange


def test_product_coerces_numeric_id_and_parses_text_embedding():
    product = Product.model_validate({"id": 42, "name": "Mug", "embedding": "[0.5, 0.25]", "tags": None})

    assert product.id == "42"
    assert product.embedding == [0.5, 0.25]
    assert product.tags == []
    assert "embedding" not in product.model_dump()


def test_parse_products_skips_malformed_rows():
    rows = [product_row("ok"), {"id": "no-name"}, product_row("negative", price=-5)]

    products = parse_products(rows)

    assert [p.id for p in products] == ["ok"]


def test_parse_products_handles_none():
    assert parse_products(None) == []


def test_favorite_brands_are_stripped_and_deduplicated():
    profile = PreferenceProfile(favorite_brands=[" Nike", "Nike", "", "Zara "])
    assert profile.favorite_brands == ["Nike", "Zara"]


def test_profile_emptiness():
    assert PreferenceProfile.empty().is_empty
    assert PreferenceProfile(price_range=PriceRange()).is_empty
    assert not PreferenceProfile(price_range=PriceRange(max=50)).is_empty
    assert not PreferenceProfile(search_history=["boots"]).is_empty


def test_record_search_appends_newest_last_and_trims():
    profile = PreferenceProfile(search_history=[f"q{i}" for i in range(10)])

    updated = profile.record_search("latest", limit=10)

    assert len(updated.search_history) == 10
    assert updated.search_history[0] == "q1"
    assert updated.search_history[-1] == "latest"
    # original is untouched
    assert profile.search_history[-1] == "q9"


def test_record_search_keeps_other_preferences():
    profile = PreferenceProfile(theme="dark", favorite_brands=["Acme"])

    updated = profile.record_search("Acme")

    assert updated.theme == "dark"
    assert updated.favorite_brands == ["Acme"]
    assert updated.search_history == ["Acme"]


def test_referral_message_is_truncated():
    row = referral_row("r1", "p1", message="x" * (MAX_MESSAGE_LENGTH + 50))

    referral = SocialReferral.model_validate(row)

    assert len(referral.message) == MAX_MESSAGE_LENGTH


def test_sender_display_name_falls_back_to_email_then_id():
    named = SocialReferral.model_validate(referral_row("r1", "p1", sender_name="Cal"))
    unnamed = SocialReferral.model_validate(referral_row("r2", "p2", sender_name=None))
    anonymous = SocialReferral.model_validate({**referral_row("r3", "p3"), "sender": None})

    assert named.sender_display_name == "Cal"
    assert unnamed.sender_display_name == "r2@example.com"
    assert anonymous.sender_display_name == "sender-r3"


def test_referral_with_removed_product():
    referral = SocialReferral.model_validate(referral_row("r1", None))
    assert referral.product is None


@pytest.mark.parametrize("bound", [-5, "lots", True, float("nan")])
def test_unusable_price_bound_is_unset(bound):
    price_range = PriceRange(min=bound, max=80)

    assert price_range.min is None
    assert price_range.max == 80


def test_unrecognized_settings_do_not_invalidate_profile():
    profile = PreferenceProfile(theme="system", notifications="maybe", favorite_brands=["Nike", 7])

    assert profile.theme == "system"
    assert profile.notifications is None
    assert profile.favorite_brands == ["Nike"]
