"""
Proveedor sintético.

Genera listings plausibles que respetan los límites de los criterios.
Permite ejercitar el pipeline completo sin credenciales y sirve de
fallback cuando los proveedores reales no devuelven nada.
"""

import asyncio
import random
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import structlog

from vitrina.config import SYNTHETIC_FEATURES, SYNTHETIC_STREETS
from vitrina.models import ListingType, Property, PropertyType, SearchCriteria
from vitrina.providers.base import BaseProvider

logger = structlog.get_logger()


class SyntheticProvider(BaseProvider):
    """
    Generador determinístico de listings.

    La semilla sale de los criterios (o de `seed` si se fija), así que los
    mismos criterios siempre producen los mismos listings.
    """

    SOURCE_NAME = "synthetic"

    # Rangos de precio por defecto cuando los criterios no los fijan
    DEFAULT_PRICE_RANGES = {
        ListingType.RENT: (800.0, 4000.0),
        ListingType.BUY: (150_000.0, 800_000.0),
    }

    LISTING_DOMAINS = {
        ListingType.RENT: [
            "https://www.apartments.com/listing",
            "https://www.rent.com/property",
            "https://www.padmapper.com/apartments",
        ],
        ListingType.BUY: [
            "https://www.realtor.com/realestateandhomes-detail",
            "https://www.zillow.com/homedetails",
            "https://www.redfin.com/home",
        ],
    }

    CONCRETE_TYPES = [
        PropertyType.HOUSE,
        PropertyType.APARTMENT,
        PropertyType.CONDO,
        PropertyType.TOWNHOUSE,
    ]

    MAX_AGE_DAYS = 45

    def __init__(
        self,
        seed: Optional[int] = None,
        min_count: int = 5,
        max_count: int = 20,
        latency_seconds: float = 0.0,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if min_count > max_count:
            raise ValueError("min_count no puede ser mayor que max_count")
        self.seed = seed
        self.min_count = min_count
        self.max_count = max_count
        self.latency_seconds = latency_seconds
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    async def fetch(self, criteria: SearchCriteria) -> list[Property]:
        if self.latency_seconds > 0:
            await asyncio.sleep(self.latency_seconds)
        return self.generate(criteria)

    def generate(self, criteria: SearchCriteria) -> list[Property]:
        """Genera los listings para los criterios (sin latencia)."""
        rng = self._rng(criteria)
        now = self.clock()
        count = rng.randint(self.min_count, self.max_count)

        properties = [self._generate_one(rng, criteria, now, index) for index in range(count)]
        logger.debug("Listings sintéticos generados", count=len(properties))
        return properties

    def _rng(self, criteria: SearchCriteria) -> random.Random:
        if self.seed is not None:
            return random.Random(self.seed)
        return random.Random(int(criteria.fingerprint()[:12], 16))

    def _price_bounds(self, criteria: SearchCriteria, listing_type: ListingType) -> tuple[float, float]:
        default_low, default_high = self.DEFAULT_PRICE_RANGES[listing_type]
        low = criteria.min_price
        high = criteria.max_price
        if low is None and high is None:
            return default_low, default_high
        if low is None:
            low = min(default_low, high * 0.5)
        if high is None:
            high = max(default_high, low * 1.5)
        return low, high

    def _generate_one(
        self,
        rng: random.Random,
        criteria: SearchCriteria,
        now: datetime,
        index: int,
    ) -> Property:
        listing_type = criteria.listing_type
        if listing_type == ListingType.ANY:
            listing_type = rng.choice([ListingType.RENT, ListingType.BUY])

        property_type = criteria.property_type
        if property_type == PropertyType.ANY:
            property_type = rng.choice(self.CONCRETE_TYPES)

        low, high = self._price_bounds(criteria, listing_type)
        step = 10 if listing_type == ListingType.RENT else 1000
        price = round(rng.uniform(low, high) / step) * step
        price = min(max(price, low), high)

        min_bedrooms = criteria.bedrooms or 1
        bedrooms = rng.randint(min_bedrooms, min_bedrooms + 2)
        min_bathrooms = criteria.bathrooms or 1
        bathrooms = rng.choice([min_bathrooms, min_bathrooms + 0.5, min_bathrooms + 1])
        square_footage = 450 + bedrooms * rng.randint(250, 450)

        street_number = rng.randint(1, 9999)
        street = rng.choice(SYNTHETIC_STREETS)
        address = f"{street_number} {street}"
        listing_id = f"{rng.getrandbits(48):012x}"

        city_slug = criteria.city.lower().replace(" ", "-")
        state = (criteria.state or "OH").upper()
        street_slug = street.lower().replace(" ", "-")
        domain = rng.choice(self.LISTING_DOMAINS[listing_type])
        listing_url = (
            f"{domain}/{street_number}-{street_slug}-{city_slug}-{state.lower()}/"
            f"{listing_id}?demo=true"
        )

        return Property(
            id=f"{self.SOURCE_NAME}-{index + 1}-{listing_id}",
            source=self.SOURCE_NAME,
            listing_url=listing_url,
            address=address,
            city=criteria.city,
            state=state,
            zip_code=f"{rng.randint(10000, 99999)}",
            listing_type=listing_type,
            price=float(price),
            bedrooms=bedrooms,
            bathrooms=float(bathrooms),
            square_footage=square_footage,
            property_type=property_type,
            description=f"{bedrooms}-bedroom {property_type.value} in {criteria.city}",
            features=self._features(rng, criteria),
            image_urls=(
                f"https://photos.zillowstatic.com/fp/{listing_id}-cc_ft_768.jpg",
                f"https://photos.zillowstatic.com/fp/{listing_id}-uncropped_scaled_within_1536_1152.jpg",
            ),
            date_added=now - timedelta(days=rng.uniform(0, self.MAX_AGE_DAYS)),
        )

    def _features(self, rng: random.Random, criteria: SearchCriteria) -> tuple[str, ...]:
        requested = sorted(criteria.features, key=str.casefold)
        taken = {f.casefold() for f in requested}
        extras = [f for f in SYNTHETIC_FEATURES if f.casefold() not in taken]
        count = min(len(extras), rng.randint(0, 3))
        return tuple(requested + rng.sample(extras, count))
