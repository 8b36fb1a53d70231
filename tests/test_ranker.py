import random

import pytest

from conftest import make_property, make_scored
from vitrina.models import PropertyType, ScoredProperty, SearchCriteria
from vitrina.ranking import diversify, sort_scored
from vitrina.ranking.ranker import price_quartile, price_quartile_cuts

OPEN = SearchCriteria(city="Columbus")


def test_sort_by_score_then_cheaper_first():
    a = make_scored(score=80, price=300_000)
    b = make_scored(score=90, price=400_000)
    c = make_scored(score=80, price=250_000)

    assert sort_scored([a, b, c]) == [b, c, a]


@pytest.mark.parametrize("max_results", [0, 1, 3, 6, 15, 20, 30])
def test_diversify_respects_cap(max_results):
    rng = random.Random(max_results)
    ranked = sort_scored([
        make_scored(
            score=rng.randint(0, 100),
            price=rng.randint(1, 50) * 10_000,
            bedrooms=rng.randint(1, 5),
            property_type=rng.choice(
                [PropertyType.HOUSE, PropertyType.CONDO, PropertyType.APARTMENT]
            ),
        )
        for _ in range(20)
    ])

    result = diversify(ranked, OPEN, max_results)

    assert len(result) <= max_results
    if len(ranked) <= max_results:
        assert result == ranked
    else:
        assert len(result) == max_results
        assert len({s.listing.id for s in result}) == len(result)


def test_covers_every_price_quartile_before_repeating():
    # 20 candidatos: el score crece con el precio, así que sin diversificar
    # los 6 mejores serían todos del cuartil más caro
    ranked = sort_scored([
        make_scored(score=50 + i, price=100_000 + i * 10_000, bedrooms=2 + i % 3)
        for i in range(20)
    ])
    cuts = price_quartile_cuts([s.listing.price for s in ranked])

    result = diversify(ranked, OPEN, max_results=6)

    assert len(result) == 6
    first_four = [price_quartile(s.listing.price, cuts) for s in result[:4]]
    assert sorted(first_four) == [0, 1, 2, 3]
    # Dentro de cada cuartil gana el de mejor score
    assert result[0] == ranked[0]


def test_quartile_cuts_do_not_depend_on_input_order():
    prices = [float(p) for p in range(100, 2100, 100)]
    shuffled = prices[:]
    random.Random(3).shuffle(shuffled)
    assert price_quartile_cuts(prices) == price_quartile_cuts(shuffled)


def test_quartile_cuts_need_two_prices():
    assert price_quartile_cuts([100.0]) == []
    assert price_quartile(100.0, []) == 0


def test_prefers_unrepresented_type_when_type_is_open():
    houses = [make_scored(score=90 - i, price=300_000, bedrooms=3) for i in range(9)]
    condo = make_scored(score=10, price=300_000, bedrooms=3, property_type=PropertyType.CONDO)
    ranked = sort_scored(houses + [condo])

    result = diversify(ranked, OPEN, max_results=3)

    assert result == [houses[0], condo, houses[1]]


def test_ignores_type_variety_when_type_is_pinned():
    houses = [make_scored(score=90 - i, price=300_000, bedrooms=3) for i in range(9)]
    condo = make_scored(score=10, price=300_000, bedrooms=3, property_type=PropertyType.CONDO)
    ranked = sort_scored(houses + [condo])
    pinned = SearchCriteria(city="Columbus", property_type=PropertyType.HOUSE)

    result = diversify(ranked, pinned, max_results=3)

    assert condo not in result
    assert result == houses[:3]


def test_prefers_unrepresented_bedroom_count():
    top = [make_scored(score=90 - i, price=300_000, bedrooms=3) for i in range(5)]
    studio = make_scored(score=5, price=300_000, bedrooms=1)
    ranked = sort_scored(top + [studio])

    result = diversify(ranked, OPEN, max_results=2)

    assert result == [top[0], studio]


def test_small_sets_pass_through_untouched():
    ranked = [make_scored(score=70), make_scored(score=60)]
    assert diversify(ranked, OPEN, max_results=5) == ranked


def test_does_not_mutate_input():
    ranked = sort_scored([make_scored(score=i, price=1000 * (i + 1)) for i in range(10)])
    snapshot = list(ranked)
    diversify(ranked, OPEN, max_results=4)
    assert ranked == snapshot
    assert all(isinstance(s, ScoredProperty) for s in ranked)
