"""Resultado de una búsqueda completa."""

from pydantic import BaseModel, ConfigDict, Field

from vitrina.models.criteria import SearchCriteria
from vitrina.models.property import ScoredProperty


class PriceRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    min: float = 0.0
    max: float = 0.0


class SearchSummary(BaseModel):
    """Resumen agregado de las propiedades devueltas."""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    average_price: float = 0.0
    price_range: PriceRange = Field(default_factory=PriceRange)
    unit_type_counts: dict[str, int] = Field(default_factory=dict)


class SearchResult(BaseModel):
    """Lista final ordenada + resumen. Es el único contrato hacia render/export."""

    model_config = ConfigDict(frozen=True)

    criteria: SearchCriteria
    properties: list[ScoredProperty] = Field(default_factory=list)
    summary: SearchSummary = Field(default_factory=SearchSummary)
    total_candidates: int = Field(
        default=0, description="Candidatos tras filtros y deduplicación"
    )
