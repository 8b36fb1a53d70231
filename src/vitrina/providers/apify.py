"""
Proveedor Apify.

Ejecuta un actor de scraping de Zillow sobre una URL de búsqueda,
espera a que el run termine y descarga el dataset resultante.
"""

import asyncio
import hashlib
import json
from typing import Optional
from urllib.parse import quote, urlencode

import structlog

from vitrina.exceptions import ProviderError
from vitrina.models import ListingType, Property, SearchCriteria
from vitrina.providers.base import HttpProvider
from vitrina.providers.normalization import (
    criteria_listing_type,
    parse_date,
    parse_float,
    parse_int,
    parse_optional_int,
    parse_price,
    resolve_listing_type,
    resolve_property_type,
)

logger = structlog.get_logger()


class ApifyProvider(HttpProvider):
    """
    Proveedor basado en runs de un actor de Apify.

    Flujo:
    1. POST /acts/{actor}/runs con la URL de búsqueda de Zillow
    2. GET /actor-runs/{run_id} hasta un estado terminal
    3. GET /datasets/{dataset_id}/items
    """

    SOURCE_NAME = "apify"
    ZILLOW_SEARCH_URL = "https://www.zillow.com/homes/{status}/"

    TERMINAL_STATUSES = {"SUCCEEDED", "FAILED", "ABORTED", "TIMED-OUT"}

    def __init__(
        self,
        api_token: str,
        actor_id: str = "petr_cermak/real-estate-scraper",
        base_url: str = "https://api.apify.com/v2",
        poll_interval_seconds: float = 2.0,
        **kwargs,
    ):
        super().__init__(**kwargs)
        if not api_token:
            raise ValueError("APIFY_API_TOKEN no configurado")
        self.api_token = api_token
        self.actor_id = actor_id
        self.base_url = base_url.rstrip("/")
        self.poll_interval_seconds = poll_interval_seconds

    def default_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_token}"}

    def build_search_url(self, criteria: SearchCriteria) -> str:
        """Construye la URL de búsqueda de Zillow que scrapea el actor."""
        listing_type = criteria_listing_type(criteria.listing_type)
        status = "for_rent" if listing_type == ListingType.RENT else "for_sale"

        filter_state: dict = {}
        if criteria.min_price is not None or criteria.max_price is not None:
            price: dict = {}
            if criteria.min_price is not None:
                price["min"] = int(criteria.min_price)
            if criteria.max_price is not None:
                price["max"] = int(criteria.max_price)
            filter_state["price"] = price
        if criteria.bedrooms:
            filter_state["beds"] = {"min": criteria.bedrooms}
        if criteria.bathrooms:
            filter_state["baths"] = {"min": criteria.bathrooms}

        search_query = {
            "pagination": {},
            "mapBounds": {},
            "filterState": filter_state,
            "isListVisible": True,
            "isMapVisible": False,
        }
        base = self.ZILLOW_SEARCH_URL.format(status=status)
        query = urlencode({"searchQueryState": json.dumps(search_query, separators=(",", ":"))})
        return f"{base}{quote(criteria.location)}/?{query}"

    def build_run_input(self, criteria: SearchCriteria) -> dict:
        return {
            "searchUrls": [{"url": self.build_search_url(criteria)}],
            "maxItems": self.max_results,
            "extractionMethod": "MAP_MARKERS",
            "proxyConfiguration": {"useApifyProxy": True},
        }

    async def fetch(self, criteria: SearchCriteria) -> list[Property]:
        # La API de Apify usa "usuario~actor" en vez de "usuario/actor"
        actor = self.actor_id.replace("/", "~")

        async with self._session_scope() as session:
            run = self._unwrap(
                await self._request_json(
                    session,
                    "POST",
                    f"{self.base_url}/acts/{actor}/runs",
                    json=self.build_run_input(criteria),
                )
            )
            run_id = run.get("id")
            logger.info("Run de Apify iniciado", run_id=run_id, actor=self.actor_id)

            while run.get("status") not in self.TERMINAL_STATUSES:
                await asyncio.sleep(self.poll_interval_seconds)
                run = self._unwrap(
                    await self._request_json(
                        session, "GET", f"{self.base_url}/actor-runs/{run_id}"
                    )
                )

            if run.get("status") != "SUCCEEDED":
                raise ProviderError(
                    self.SOURCE_NAME,
                    message=f"Run {run_id} terminó con estado {run.get('status')}",
                )

            items = await self._request_json(
                session,
                "GET",
                f"{self.base_url}/datasets/{run.get('defaultDatasetId')}/items",
                params={"clean": "true", "limit": str(self.max_results)},
            )

        return self.parse_items(items, criteria)

    def _unwrap(self, payload) -> dict:
        """Las respuestas de Apify vienen envueltas en {'data': {...}}."""
        if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
            raise ProviderError(self.SOURCE_NAME, message="Respuesta de run sin 'data'")
        return payload["data"]

    def parse_item(self, item: dict, criteria: SearchCriteria) -> Optional[Property]:
        address = item.get("address") or item.get("street")
        if not isinstance(address, str) or not address.strip():
            return None

        price = parse_price(item.get("price") or item.get("unformattedPrice"))
        description = item.get("description") or ""
        structured = item.get("features") if isinstance(item.get("features"), list) else []
        images = item.get("images") if isinstance(item.get("images"), list) else []

        return Property(
            id=f"apify-{self._extract_id(item, address, price)}",
            source=self.SOURCE_NAME,
            listing_url=item.get("url") or item.get("listingUrl") or "",
            address=address.strip(),
            city=item.get("city") or criteria.city,
            state=item.get("state") or (criteria.state or ""),
            zip_code=str(item.get("zipCode") or item.get("postalCode") or ""),
            listing_type=resolve_listing_type(
                item.get("statusType") or item.get("listingType"),
                default=criteria_listing_type(criteria.listing_type),
            ),
            price=price,
            bedrooms=parse_int(item.get("bedrooms") or item.get("beds")),
            bathrooms=parse_float(item.get("bathrooms") or item.get("baths")),
            square_footage=parse_optional_int(
                item.get("squareFootage") or item.get("livingArea")
            ),
            property_type=resolve_property_type(item.get("homeType") or item.get("propertyType")),
            description=description,
            features=self.detector.merge_features(structured, description),
            image_urls=tuple(str(url) for url in images),
            date_added=parse_date(item.get("dateAdded") or item.get("datePosted")),
        )

    def _extract_id(self, item: dict, address: str, price: float) -> str:
        raw_id = item.get("id") or item.get("zpid")
        if raw_id:
            return str(raw_id)
        content = f"{address}|{price}"
        return hashlib.sha256(content.encode()).hexdigest()[:16]
