import math

import pytest

from conftest import NOW, make_scored
from vitrina.models import ListingType, PricePosition, PropertyType, SearchCriteria
from vitrina.ranking import annotate, compare_to_market, summarize
from vitrina.ranking.recommendations import build_recommendations


class TestMarketComparison:
    def test_uses_similar_peers_from_full_set(self):
        target = make_scored(price=300_000, bedrooms=3)
        peers = [
            make_scored(price=200_000, bedrooms=2),
            make_scored(price=400_000, bedrooms=4),
        ]
        unrelated = [
            make_scored(price=100_000, bedrooms=3, property_type=PropertyType.CONDO),
            make_scored(price=50_000, bedrooms=6),
            make_scored(price=2_000, bedrooms=3, listing_type=ListingType.RENT),
        ]

        comparison = compare_to_market(target, [target] + peers + unrelated)

        assert comparison.comparable_count == 2
        assert comparison.average_price == 300_000
        assert comparison.median_price == 300_000
        assert comparison.percentile_rank == 50.0
        assert comparison.price_position == PricePosition.AT_MARKET

    def test_needs_two_comparables(self):
        target = make_scored(price=300_000)
        only_one = make_scored(price=310_000)
        assert compare_to_market(target, [target, only_one]) is None
        assert compare_to_market(target, [target]) is None

    @pytest.mark.parametrize(
        "price, position",
        [
            (250_000, PricePosition.BELOW_MARKET),
            (290_000, PricePosition.AT_MARKET),
            (340_000, PricePosition.ABOVE_MARKET),
        ],
    )
    def test_price_position(self, price, position):
        target = make_scored(price=price)
        peers = [make_scored(price=300_000), make_scored(price=300_000)]
        comparison = compare_to_market(target, [target] + peers)
        assert comparison.price_position == position

    def test_identical_prices_never_produce_nan(self):
        target = make_scored(price=0)
        peers = [make_scored(price=0), make_scored(price=0)]
        comparison = compare_to_market(target, [target] + peers)
        assert not math.isnan(comparison.percentile_rank)
        assert comparison.percentile_rank == 0


class TestRecommendations:
    def test_at_most_three_reasons(self):
        criteria = SearchCriteria(city="Columbus", bedrooms=2, max_price=400_000)
        item = make_scored(
            price=300_000,
            square_footage=2000,
            bedrooms=3,
            features=("Pool", "Gym"),
            age_days=1,
        )

        reasons = build_recommendations(item, criteria, NOW)

        assert reasons == [
            "Good value at $150.00/sq ft",
            "1 extra bedroom beyond your requirement",
            "Premium amenities: Pool, Gym",
        ]

    def test_recency_and_budget(self):
        criteria = SearchCriteria(city="Columbus", max_price=400_000)
        item = make_scored(price=300_000, age_days=0)

        assert build_recommendations(item, criteria, NOW) == [
            "New listing today",
            "$100,000 under your budget",
        ]

    def test_listed_days_ago(self):
        item = make_scored(age_days=5)
        assert build_recommendations(item, None, NOW) == ["Listed 5 days ago"]

    def test_nothing_notable(self):
        item = make_scored(age_days=30, square_footage=None, features=())
        assert build_recommendations(item, SearchCriteria(city="X"), NOW) == []


def test_annotate_returns_new_records():
    items = [make_scored(price=300_000 + i * 1000, age_days=2) for i in range(4)]

    annotated = annotate(items[:2], items, SearchCriteria(city="Columbus"), NOW)

    assert [a.listing for a in annotated] == [i.listing for i in items[:2]]
    assert all(a.recommendations for a in annotated)
    assert all(a.market_comparison.comparable_count == 3 for a in annotated)
    assert items[0].recommendations == ()
    assert items[0].market_comparison is None


class TestSummary:
    def test_empty(self):
        summary = summarize([])
        assert summary.count == 0
        assert summary.average_price == 0
        assert (summary.price_range.min, summary.price_range.max) == (0, 0)
        assert summary.unit_type_counts == {}

    def test_counts_and_prices(self):
        items = [
            make_scored(price=100),
            make_scored(price=200),
            make_scored(price=301, property_type=PropertyType.CONDO),
        ]

        summary = summarize(items)

        assert summary.count == 3
        assert summary.average_price == 200
        assert (summary.price_range.min, summary.price_range.max) == (100, 301)
        assert summary.unit_type_counts == {"house": 2, "condo": 1}
