import pytest

from vitrina.config import Settings
from vitrina.models import ListingType, PropertyType
from vitrina.scripts.run_search import build_parser, criteria_from_args, settings_from_args


def parse(*argv):
    return build_parser().parse_args(list(argv))


def test_flags_become_criteria():
    args = parse(
        "--city", "Columbus", "--state", "OH",
        "--listing-type", "buy", "--property-type", "house",
        "--max-price", "500000", "--bedrooms", "3",
        "--features", "garage, pool",
    )

    criteria = criteria_from_args(args)

    assert criteria.location == "Columbus, OH"
    assert criteria.listing_type == ListingType.BUY
    assert criteria.property_type == PropertyType.HOUSE
    assert criteria.max_price == 500000
    assert criteria.bedrooms == 3
    assert criteria.features == frozenset({"garage", "pool"})


def test_defaults_are_open():
    criteria = criteria_from_args(parse("--city", "Dayton"))
    assert criteria.listing_type == ListingType.ANY
    assert criteria.property_type == PropertyType.ANY
    assert criteria.features == frozenset()


def test_unknown_property_type_is_rejected():
    with pytest.raises(SystemExit):
        parse("--city", "Dayton", "--property-type", "castle")


def test_mode_flags_override_settings():
    base = Settings(_env_file=None, strict_mode=False, use_mock_data=False)

    updated = settings_from_args(parse("--city", "X", "--strict", "--mock"), base)

    assert updated.strict_mode and updated.use_mock_data
    assert not base.strict_mode
    assert settings_from_args(parse("--city", "X"), base) is base
