"""
Proveedor Zillow vía RapidAPI.

Endpoint: GET https://zillow-com1.p.rapidapi.com/propertyExtendedSearch
"""

import hashlib
from datetime import datetime
from typing import Optional
from urllib.parse import urljoin

import structlog

from vitrina.models import ListingType, Property, PropertyType, SearchCriteria
from vitrina.providers.base import HttpProvider
from vitrina.providers.normalization import (
    criteria_listing_type,
    date_from_days_on_market,
    parse_float,
    parse_int,
    parse_optional_int,
    parse_price,
    resolve_listing_type,
    resolve_property_type,
    split_address,
)

logger = structlog.get_logger()


class ZillowProvider(HttpProvider):
    """
    Proveedor específico para la API de Zillow en RapidAPI.

    Ejemplo de query:
    - location=Columbus, OH&status_type=ForSale&home_type=Houses&maxPrice=500000
    """

    SOURCE_NAME = "zillow"
    BASE_URL = "https://www.zillow.com"
    SEARCH_PATH = "/propertyExtendedSearch"

    HOME_TYPES = {
        PropertyType.HOUSE: "Houses",
        PropertyType.APARTMENT: "Apartments",
        PropertyType.CONDO: "Condos",
        PropertyType.TOWNHOUSE: "Townhomes",
    }

    # Flags booleanos de la respuesta -> tag de feature
    FEATURE_FLAGS = {
        "hasGarage": "Garage",
        "hasPool": "Pool",
        "hasPetsAllowed": "Pet-friendly",
        "hasInUnitLaundry": "In-unit laundry",
    }

    def __init__(
        self,
        api_key: str,
        api_host: str = "zillow-com1.p.rapidapi.com",
        **kwargs,
    ):
        super().__init__(**kwargs)
        if not api_key:
            raise ValueError("ZILLOW_API_KEY no configurada")
        self.api_key = api_key
        self.api_host = api_host

    def default_headers(self) -> dict[str, str]:
        return {
            "X-RapidAPI-Key": self.api_key,
            "X-RapidAPI-Host": self.api_host,
        }

    def build_query(self, criteria: SearchCriteria) -> dict[str, str]:
        """Traduce SearchCriteria a los query params de Zillow."""
        listing_type = criteria_listing_type(criteria.listing_type)
        params = {
            "location": criteria.location,
            "status_type": "ForRent" if listing_type == ListingType.RENT else "ForSale",
        }

        home_type = self.HOME_TYPES.get(criteria.property_type)
        if home_type:
            params["home_type"] = home_type

        # Zillow usa parámetros distintos para precio de alquiler
        prefix = "rent" if listing_type == ListingType.RENT else ""
        if criteria.min_price is not None:
            key = f"{prefix}MinPrice" if prefix else "minPrice"
            params[key] = str(int(criteria.min_price))
        if criteria.max_price is not None:
            key = f"{prefix}MaxPrice" if prefix else "maxPrice"
            params[key] = str(int(criteria.max_price))

        if criteria.bedrooms:
            params["bedsMin"] = str(criteria.bedrooms)
        if criteria.bathrooms:
            params["bathsMin"] = str(criteria.bathrooms)
        return params

    async def fetch(self, criteria: SearchCriteria) -> list[Property]:
        params = self.build_query(criteria)
        url = f"https://{self.api_host}{self.SEARCH_PATH}"
        logger.info("Consultando Zillow", params=params)

        async with self._session_scope() as session:
            payload = await self._request_json(session, "GET", url, params=params)

        return self.parse_results(payload, criteria)

    def parse_results(self, payload, criteria: SearchCriteria) -> list[Property]:
        """Extrae la lista de items del payload ('props' o 'results')."""
        if isinstance(payload, dict):
            items = payload.get("props")
            if items is None:
                items = payload.get("results", [])
        else:
            items = payload
        return self.parse_items(items, criteria)

    def parse_item(
        self,
        item: dict,
        criteria: SearchCriteria,
        now: Optional[datetime] = None,
    ) -> Optional[Property]:
        address = self._extract_address(item)
        if not address["street"]:
            return None

        price = parse_price(item.get("price"))
        if not price:
            price = parse_price(item.get("zestimate") or item.get("rentZestimate"))

        description = item.get("description") or ""
        flags = [tag for flag, tag in self.FEATURE_FLAGS.items() if item.get(flag)]

        detail_url = item.get("detailUrl") or ""
        if detail_url:
            detail_url = urljoin(self.BASE_URL, detail_url)

        return Property(
            id=f"zillow-{self._extract_id(item, address['street'], price)}",
            source=self.SOURCE_NAME,
            listing_url=detail_url,
            address=address["street"],
            city=address["city"] or criteria.city,
            state=address["state"] or (criteria.state or ""),
            zip_code=address["zip_code"],
            listing_type=resolve_listing_type(
                item.get("listingStatus"),
                default=criteria_listing_type(criteria.listing_type),
            ),
            price=price,
            bedrooms=parse_int(item.get("bedrooms")),
            bathrooms=parse_float(item.get("bathrooms")),
            square_footage=parse_optional_int(item.get("livingArea")),
            property_type=resolve_property_type(item.get("propertyType")),
            description=description,
            features=self.detector.merge_features(flags, description),
            image_urls=(item["imgSrc"],) if item.get("imgSrc") else (),
            date_added=date_from_days_on_market(item.get("daysOnZillow"), now),
        )

    def _extract_address(self, item: dict) -> dict[str, str]:
        raw = item.get("address")
        if isinstance(raw, dict):
            return {
                "street": raw.get("streetAddress") or "",
                "city": raw.get("city") or "",
                "state": raw.get("state") or "",
                "zip_code": str(raw.get("zipcode") or ""),
            }
        data = split_address(raw if isinstance(raw, str) else None)
        # Algunos items traen los campos sueltos
        data["city"] = data["city"] or item.get("city") or ""
        data["state"] = data["state"] or item.get("state") or ""
        data["zip_code"] = data["zip_code"] or str(item.get("zipcode") or "")
        return data

    def _extract_id(self, item: dict, street: str, price: float) -> str:
        zpid = item.get("zpid")
        if zpid:
            return str(zpid)
        content = f"{street}|{price}"
        return hashlib.sha256(content.encode()).hexdigest()[:16]
