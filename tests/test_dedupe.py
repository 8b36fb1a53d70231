import random

from conftest import make_property
from vitrina.ranking import dedupe, dedupe_key


def test_same_address_and_price_keeps_first():
    first = make_property(address="100 Main St", price=300_000, square_footage=None, source="zillow")
    second = make_property(address="100 Main St", price=300_000, square_footage=1800, source="apify")

    result = dedupe([first, second])

    assert result == [first]


def test_key_normalizes_case_and_whitespace():
    a = make_property(address="  100 MAIN St ", price=1000)
    b = make_property(address="100 main st", price=1000)
    assert dedupe_key(a) == dedupe_key(b)


def test_price_change_is_a_different_listing():
    a = make_property(address="100 Main St", price=300_000)
    b = make_property(address="100 Main St", price=295_000)
    assert dedupe([a, b]) == [a, b]


def test_preserves_relative_order():
    a = make_property(address="1 A St")
    b = make_property(address="2 B St")
    c = make_property(address="3 C St")
    assert dedupe([c, a, b, a]) == [c, a, b]


def test_idempotent_and_never_grows():
    rng = random.Random(42)
    addresses = ["100 Main St", "100 MAIN ST", " 100 main st", "5 Oak Ave", "7 Pine Rd"]
    prices = [100_000, 200_000, 300_000]

    for _ in range(200):
        props = [
            make_property(address=rng.choice(addresses), price=rng.choice(prices))
            for _ in range(rng.randint(0, 12))
        ]
        once = dedupe(props)
        assert len(once) <= len(props)
        assert dedupe(once) == once
        assert len({dedupe_key(p) for p in once}) == len(once)
