"""
Criterios de búsqueda.

Valor inmutable producido por la capa de entrada (CLI / extracción de
lenguaje natural) y consumido en solo lectura por el pipeline.
"""

import hashlib
import json
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)


class PropertyType(str, Enum):
    """Tipo de unidad. ANY solo tiene sentido en criterios."""

    HOUSE = "house"
    APARTMENT = "apartment"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    ANY = "any"


class ListingType(str, Enum):
    """Tipo de operación. ANY solo tiene sentido en criterios."""

    RENT = "rent"
    BUY = "buy"
    ANY = "any"


class SearchCriteria(BaseModel):
    """Restricciones de búsqueda del usuario."""

    model_config = ConfigDict(frozen=True)

    # Ubicación
    city: str = Field(..., min_length=1, description="Ciudad a buscar")
    state: Optional[str] = Field(None, description="Estado (ej: OH)")

    # Operación y tipo
    listing_type: ListingType = Field(default=ListingType.ANY)
    property_type: PropertyType = Field(default=PropertyType.ANY)

    # Precio
    min_price: Optional[float] = Field(None, ge=0, description="Precio mínimo")
    max_price: Optional[float] = Field(None, ge=0, description="Precio máximo")

    # Tamaño
    bedrooms: Optional[int] = Field(None, ge=0, description="Mínimo de dormitorios")
    bathrooms: Optional[float] = Field(None, ge=0, description="Mínimo de baños")

    # Features deseadas (tags libres: "pool", "garage", ...)
    features: frozenset[str] = Field(default_factory=frozenset)

    @field_validator("city", "state")
    @classmethod
    def _strip_location(cls, value: Optional[str], info: ValidationInfo) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        if info.field_name == "city" and not value:
            raise ValueError("city no puede estar vacía")
        return value

    @field_validator("features", mode="before")
    @classmethod
    def _clean_features(cls, value):
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = value.split(",")
        return frozenset(f.strip() for f in value if f and f.strip())

    @model_validator(mode="after")
    def _check_price_bounds(self) -> "SearchCriteria":
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("min_price no puede ser mayor que max_price")
        return self

    @property
    def location(self) -> str:
        """Ubicación como texto: 'Columbus, OH'."""
        if self.state:
            return f"{self.city}, {self.state}"
        return self.city

    @property
    def pins_property_type(self) -> bool:
        return self.property_type != PropertyType.ANY

    def fingerprint(self) -> str:
        """
        Hash estable de los criterios.

        Insensible a mayúsculas en ubicación y features, y al orden de las
        features: dos criterios lógicamente iguales dan el mismo hash.
        """
        normalized = {
            "city": self.city.casefold(),
            "state": (self.state or "").casefold(),
            "listing_type": self.listing_type.value,
            "property_type": self.property_type.value,
            "min_price": float(self.min_price) if self.min_price is not None else None,
            "max_price": float(self.max_price) if self.max_price is not None else None,
            "bedrooms": self.bedrooms,
            "bathrooms": float(self.bathrooms) if self.bathrooms is not None else None,
            "features": sorted({f.casefold() for f in self.features}),
        }
        content = json.dumps(normalized, sort_keys=True)
        return hashlib.sha256(content.encode()).hexdigest()
