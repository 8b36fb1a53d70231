"""
Motor de búsqueda.

Orquesta el pipeline completo para un request:
- Perfil: enriquece los criterios con el snapshot del usuario (opcional)
- Agregación: cache + fan-out a proveedores + fallback
- Filtro hard, deduplicación, scoring y orden
- Diversificación, recomendaciones y resumen
"""

from contextlib import AsyncExitStack
from datetime import datetime
from typing import Optional

import structlog

from vitrina.aggregation import Aggregator, SearchCache
from vitrina.config import Settings, get_settings
from vitrina.models import SearchCriteria, SearchResult, UserProfile, apply_profile
from vitrina.providers import build_providers, build_synthetic_provider
from vitrina.ranking import (
    DEFAULT_MAX_RESULTS,
    annotate,
    dedupe,
    diversify,
    filter_properties,
    rank,
    summarize,
)


class SearchEngine:
    """
    Pipeline de búsqueda sobre un agregador.

    Las etapas posteriores a la agregación son síncronas y puras; un error
    en ellas es un defecto y se propaga tal cual.
    """

    def __init__(
        self,
        aggregator: Aggregator,
        max_results: int = DEFAULT_MAX_RESULTS,
        logger=None,
    ):
        self.aggregator = aggregator
        self.max_results = max_results
        self.logger = logger or structlog.get_logger()
        self._stack: Optional[AsyncExitStack] = None

    async def __aenter__(self):
        """
        Context manager entry: abre los proveedores para reutilizar sus
        sesiones HTTP entre búsquedas.
        """
        async with AsyncExitStack() as stack:
            for provider in self.aggregator.providers:
                await stack.enter_async_context(provider)
            self._stack = stack.pop_all()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit: cierra los proveedores."""
        if self._stack is not None:
            stack, self._stack = self._stack, None
            await stack.aclose()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, logger=None) -> "SearchEngine":
        """Arma proveedores, cache y agregador a partir de la configuración."""
        settings = settings or get_settings()
        logger = logger or structlog.get_logger()
        if settings.strict_mode and settings.use_mock_data:
            logger.warning(
                "Modo estricto con datos mock: no hay proveedores reales, "
                "toda búsqueda terminará en NoResultsError"
            )
        aggregator = Aggregator(
            providers=build_providers(settings),
            cache=SearchCache(
                ttl_seconds=settings.cache_ttl_seconds,
                max_entries=settings.cache_max_entries,
            ),
            synthetic=build_synthetic_provider(settings),
            strict_mode=settings.strict_mode,
            timeout_seconds=settings.provider_timeout_seconds,
            logger=logger,
        )
        return cls(aggregator, max_results=settings.max_results, logger=logger)

    async def search(
        self,
        criteria: SearchCriteria,
        profile: Optional[UserProfile] = None,
        max_results: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> SearchResult:
        """
        Ejecuta una búsqueda.

        Args:
            criteria: Criterios del usuario
            profile: Snapshot de preferencias aprendidas (opcional)
            max_results: Tope de resultados (default: el del motor)
            now: Instante de referencia para antigüedad (default: ahora)

        Returns:
            SearchResult con las propiedades anotadas y el resumen

        Raises:
            NoResultsError: modo estricto sin resultados reales
            AggregationError: falla orquestando proveedores
        """
        limit = self.max_results if max_results is None else max_results
        effective = apply_profile(criteria, profile)
        if effective != criteria:
            self.logger.info(
                "Criterios enriquecidos con perfil",
                user_id=profile.user_id,
                property_type=effective.property_type.value,
                features=sorted(effective.features),
            )

        raw = await self.aggregator.aggregate(effective)

        kept, rejected = filter_properties(raw, effective)
        if rejected:
            self.logger.info("Propiedades descartadas por filtros", **dict(rejected))

        unique = dedupe(kept)
        if len(unique) < len(kept):
            self.logger.info("Duplicados eliminados", removed=len(kept) - len(unique))

        ranked = rank(unique, effective, now)
        chosen = diversify(ranked, effective, limit)
        annotated = annotate(chosen, ranked, effective, now)

        self.logger.info(
            "Búsqueda completada",
            location=effective.location,
            candidates=len(raw),
            after_filters=len(unique),
            returned=len(annotated),
        )

        return SearchResult(
            criteria=effective,
            properties=annotated,
            summary=summarize(annotated),
            total_candidates=len(unique),
        )
