from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from conftest import make_property
from vitrina.models import (
    ListingType,
    PriceRangePattern,
    PropertyType,
    SearchCriteria,
    UserProfile,
    apply_profile,
)


class TestSearchCriteria:
    def test_fingerprint_ignores_case_whitespace_and_feature_order(self):
        a = SearchCriteria(city="Columbus", state="OH", features=["Pool", "garage"])
        b = SearchCriteria(city=" columbus ", state="oh", features="GARAGE, pool")
        assert a.fingerprint() == b.fingerprint()

    def test_fingerprint_changes_with_fields(self):
        a = SearchCriteria(city="Columbus", bedrooms=2)
        b = SearchCriteria(city="Columbus", bedrooms=3)
        assert a.fingerprint() != b.fingerprint()

    def test_fingerprint_treats_int_and_float_prices_alike(self):
        a = SearchCriteria(city="Columbus", max_price=500000)
        b = SearchCriteria(city="Columbus", max_price=500000.0)
        assert a.fingerprint() == b.fingerprint()

    def test_features_from_comma_string(self):
        criteria = SearchCriteria(city="Columbus", features=" pool, ,garage ")
        assert criteria.features == frozenset({"pool", "garage"})

    def test_min_price_above_max_is_rejected(self):
        with pytest.raises(ValidationError):
            SearchCriteria(city="Columbus", min_price=500, max_price=100)

    @pytest.mark.parametrize("city", ["", "   ", "\t\n"])
    def test_empty_city_is_rejected(self, city):
        with pytest.raises(ValidationError):
            SearchCriteria(city=city)

    def test_is_immutable(self):
        criteria = SearchCriteria(city="Columbus")
        with pytest.raises(ValidationError):
            criteria.city = "Dayton"

    def test_location(self):
        assert SearchCriteria(city="Columbus", state="OH").location == "Columbus, OH"
        assert SearchCriteria(city="Columbus").location == "Columbus"

    def test_pins_property_type(self):
        assert not SearchCriteria(city="X").pins_property_type
        assert SearchCriteria(city="X", property_type="condo").pins_property_type


class TestProperty:
    def test_naive_date_becomes_utc(self):
        prop = make_property(date_added=datetime(2026, 1, 1))
        assert prop.date_added.tzinfo == timezone.utc

    def test_price_per_sqft(self):
        assert make_property(price=300_000, square_footage=1500).price_per_sqft == 200
        assert make_property(square_footage=None).price_per_sqft is None

    def test_age_days(self, now):
        assert make_property(age_days=3).age_days(now) == pytest.approx(3)

    def test_age_is_never_negative(self, now):
        assert make_property(age_days=-2).age_days(now) == 0


class TestApplyProfile:
    @pytest.fixture
    def profile(self):
        return UserProfile(
            user_id="u1",
            preferred_property_types={PropertyType.CONDO: 5, PropertyType.HOUSE: 2},
            feature_preferences={"pool": 3.0, "gym": 0.5, "Garage": 2.0, "doorman": 1.5},
            price_range_patterns=(
                PriceRangePattern(min_price=100_000, max_price=200_000, frequency=1),
                PriceRangePattern(min_price=300_000, max_price=400_000, frequency=4),
            ),
        )

    def test_enriches_open_criteria(self, profile):
        criteria = SearchCriteria(city="Columbus", features=["garage"])

        enriched = apply_profile(criteria, profile)

        assert enriched.property_type == PropertyType.CONDO
        assert enriched.features == frozenset({"garage", "pool", "doorman"})
        assert (enriched.min_price, enriched.max_price) == (300_000, 400_000)
        # El original no cambia
        assert criteria.property_type == PropertyType.ANY

    def test_keeps_explicit_choices(self, profile):
        criteria = SearchCriteria(
            city="Columbus",
            property_type=PropertyType.HOUSE,
            listing_type=ListingType.BUY,
            max_price=250_000,
            features=["pool", "garage", "doorman"],
        )

        enriched = apply_profile(criteria, profile)

        assert enriched == criteria

    def test_without_profile_returns_same_criteria(self):
        criteria = SearchCriteria(city="Columbus")
        assert apply_profile(criteria, None) is criteria
