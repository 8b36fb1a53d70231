"""
Agregador de proveedores.

Consulta el cache, hace fan-out concurrente a los proveedores configurados
y decide si caer al generador sintético (modo leniente) o fallar (modo
estricto) cuando no hay resultados.
"""

import asyncio
from typing import Optional, Sequence

import structlog

from vitrina.aggregation.cache import SearchCache
from vitrina.exceptions import AggregationError, NoResultsError, ProviderError
from vitrina.models import Property, SearchCriteria
from vitrina.providers.base import BaseProvider


class Aggregator:
    """
    Fan-out a proveedores con tolerancia a fallas parciales.

    Flujo:
    1. Cache hit -> devolver sin llamar a nadie
    2. Llamar a todos los proveedores en paralelo, cada uno con su timeout
    3. Un proveedor que falla o vence aporta [] y se loguea
    4. Sin resultados: sintético (leniente) o NoResultsError (estricto)
    5. Guardar el resultado en cache
    """

    def __init__(
        self,
        providers: Sequence[BaseProvider],
        cache: Optional[SearchCache] = None,
        synthetic: Optional[BaseProvider] = None,
        strict_mode: bool = False,
        timeout_seconds: float = 30.0,
        logger=None,
    ):
        if not strict_mode and synthetic is None:
            raise ValueError("El modo leniente necesita un proveedor sintético de fallback")
        self.providers = list(providers)
        self.cache = cache
        self.synthetic = synthetic
        self.strict_mode = strict_mode
        self.timeout_seconds = timeout_seconds
        self.logger = logger or structlog.get_logger()

    async def aggregate(self, criteria: SearchCriteria) -> list[Property]:
        """
        Obtiene la lista cruda (sin deduplicar ni ordenar) de propiedades.

        Raises:
            NoResultsError: modo estricto y ningún proveedor real devolvió nada
            AggregationError: falla inesperada orquestando el fan-out
        """
        if self.cache is not None:
            cached = self.cache.get(criteria)
            if cached is not None:
                self.logger.info("Resultados desde cache", count=len(cached))
                return cached

        try:
            results = await asyncio.gather(
                *(self._call_provider(provider, criteria) for provider in self.providers)
            )
        except Exception as e:
            raise AggregationError(f"Falla orquestando proveedores: {e}") from e

        merged = [prop for provider_results in results for prop in provider_results]
        self.logger.info(
            "Fan-out completado",
            providers=len(self.providers),
            with_results=sum(1 for r in results if r),
            count=len(merged),
        )

        if not merged:
            merged = await self._fallback(criteria)

        if self.cache is not None:
            self.cache.put(criteria, merged)
        return merged

    async def _call_provider(
        self, provider: BaseProvider, criteria: SearchCriteria
    ) -> list[Property]:
        """Llama a un proveedor; cualquier falla se contiene y devuelve []."""
        try:
            return await asyncio.wait_for(provider.search(criteria), self.timeout_seconds)
        except asyncio.TimeoutError as e:
            error = ProviderError(
                provider.name, e, message=f"timeout tras {self.timeout_seconds}s"
            )
        except ProviderError as e:
            error = e

        self.logger.warning(
            "Proveedor falló",
            provider=error.provider,
            error_type=type(error).__name__,
            cause=type(error.cause).__name__ if error.cause else None,
            error=str(error),
        )
        return []

    async def _fallback(self, criteria: SearchCriteria) -> list[Property]:
        if self.strict_mode:
            self.logger.error(
                "Sin resultados en modo estricto",
                providers=[p.name for p in self.providers],
            )
            raise NoResultsError(criteria, [p.name for p in self.providers])

        self.logger.warning("Sin resultados reales, usando datos sintéticos")
        try:
            return await self.synthetic.search(criteria)
        except ProviderError as e:
            raise AggregationError(f"Falló el generador sintético: {e}") from e
