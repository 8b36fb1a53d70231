"""
Listings y listings puntuados.

Property es lo que devuelve un proveedor; ScoredProperty es el registro
derivado que producen el scoring, la diversificación y las recomendaciones.
Ninguno se muta: cada etapa crea copias nuevas.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vitrina.models.criteria import ListingType, PropertyType


class Property(BaseModel):
    """Un listing tal como lo entrega un proveedor."""

    model_config = ConfigDict(frozen=True)

    # Identificación
    id: str = Field(..., description="ID único, prefijado por proveedor")
    source: str = Field(..., description="Proveedor origen: zillow, apify, synthetic")
    listing_url: str = Field(default="", description="URL canónica del listing")

    # Ubicación
    address: str = Field(default="", description="Calle y número")
    city: str = Field(default="")
    state: str = Field(default="")
    zip_code: str = Field(default="")

    # Operación y precio
    listing_type: ListingType = Field(default=ListingType.BUY)
    price: float = Field(default=0.0, ge=0)

    # Características físicas
    bedrooms: int = Field(default=0, ge=0)
    bathrooms: float = Field(default=0.0, ge=0)
    square_footage: Optional[int] = Field(None, ge=0, description="None si el proveedor no lo informa")
    property_type: PropertyType = Field(default=PropertyType.HOUSE)

    # Contenido
    description: str = Field(default="")
    features: tuple[str, ...] = Field(default_factory=tuple)
    image_urls: tuple[str, ...] = Field(default_factory=tuple)

    # Metadatos
    date_added: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Primera vez que se vio el listing",
    )

    @field_validator("date_added")
    @classmethod
    def _ensure_timezone(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def price_per_sqft(self) -> Optional[float]:
        """Precio por pie cuadrado, None si falta la superficie."""
        if not self.square_footage or self.price <= 0:
            return None
        return self.price / self.square_footage

    def age_days(self, now: Optional[datetime] = None) -> float:
        now = now or datetime.now(timezone.utc)
        return max(0.0, (now - self.date_added).total_seconds() / 86400)


class PricePosition(str, Enum):
    BELOW_MARKET = "below_market"
    AT_MARKET = "at_market"
    ABOVE_MARKET = "above_market"


class MarketComparison(BaseModel):
    """Estadísticas contra propiedades comparables del mismo set."""

    model_config = ConfigDict(frozen=True)

    comparable_count: int = Field(..., ge=2)
    average_price: float
    median_price: float
    percentile_rank: float = Field(
        ..., ge=0, le=100, description="% de comparables más baratos que esta propiedad"
    )
    price_position: PricePosition


class ScoredProperty(BaseModel):
    """Property + score de match (0-100) + anotaciones opcionales."""

    model_config = ConfigDict(frozen=True)

    listing: Property
    score: int = Field(..., ge=0, le=100)
    recommendations: tuple[str, ...] = Field(default_factory=tuple)
    market_comparison: Optional[MarketComparison] = None
