"""
Proveedor base abstracto.

Define la interfaz común para todas las fuentes de listings y la lógica
HTTP compartida (sesión aiohttp, reintentos con tenacity).
"""

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import aiohttp
import structlog
from pydantic import ValidationError
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_exponential

from vitrina.exceptions import ProviderError
from vitrina.models import Property, SearchCriteria
from vitrina.providers.feature_detector import KeywordFeatureDetector

logger = structlog.get_logger()


class BaseProvider(ABC):
    """
    Clase base para proveedores de listings.

    Las subclases implementan fetch(); search() garantiza que cualquier
    falla salga como ProviderError y nunca como un error sin estructura.
    """

    # Nombre del proveedor (override en subclases)
    SOURCE_NAME: str = "base"

    @property
    def name(self) -> str:
        return self.SOURCE_NAME

    async def __aenter__(self):
        """Context manager entry: abre recursos compartidos (si los hay)."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit: libera recursos."""
        pass

    async def search(self, criteria: SearchCriteria) -> list[Property]:
        """
        Busca propiedades para los criterios.

        Raises:
            ProviderError: si la llamada o el mapeo de la respuesta fallan
        """
        try:
            properties = await self.fetch(criteria)
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(self.SOURCE_NAME, e) from e

        logger.info(
            "Proveedor respondió",
            source=self.SOURCE_NAME,
            location=criteria.location,
            count=len(properties),
        )
        return properties

    @abstractmethod
    async def fetch(self, criteria: SearchCriteria) -> list[Property]:
        """
        Consulta la fuente y mapea la respuesta a Property.

        Args:
            criteria: Criterios de búsqueda

        Returns:
            Lista de Property (puede estar vacía)
        """
        pass


def _is_transient(exc: BaseException) -> bool:
    """Errores que vale la pena reintentar."""
    if isinstance(exc, aiohttp.ClientResponseError):
        return exc.status == 429 or exc.status >= 500
    return isinstance(exc, (aiohttp.ClientConnectionError, asyncio.TimeoutError))


class HttpProvider(BaseProvider):
    """
    Proveedor que habla JSON sobre HTTP.

    Se puede usar como context manager para reutilizar la sesión entre
    búsquedas; si no, cada búsqueda abre y cierra su propia sesión.
    """

    def __init__(
        self,
        timeout_seconds: float = 30.0,
        max_results: int = 50,
        detector: Optional[KeywordFeatureDetector] = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.max_results = max_results
        self.detector = detector or KeywordFeatureDetector()
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        """Context manager entry: abre la sesión HTTP."""
        self._session = self._new_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit: cierra la sesión HTTP."""
        if self._session:
            await self._session.close()
            self._session = None

    def default_headers(self) -> dict[str, str]:
        return {}

    def _new_session(self) -> aiohttp.ClientSession:
        return aiohttp.ClientSession(
            headers=self.default_headers(),
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
        )

    @asynccontextmanager
    async def _session_scope(self) -> AsyncIterator[aiohttp.ClientSession]:
        if self._session is not None:
            yield self._session
            return
        session = self._new_session()
        try:
            yield session
        finally:
            await session.close()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception(_is_transient),
        reraise=True,
    )
    async def _request_json(
        self,
        session: aiohttp.ClientSession,
        method: str,
        url: str,
        **kwargs,
    ):
        """Request HTTP que devuelve el JSON decodificado."""
        async with session.request(method, url, **kwargs) as response:
            response.raise_for_status()
            return await response.json(content_type=None)

    def parse_items(self, items, criteria: SearchCriteria) -> list[Property]:
        """
        Mapea una lista de items crudos.

        Un item mal formado se loguea y se descarta; una respuesta que no es
        una lista es un error del proveedor.
        """
        if not isinstance(items, list):
            raise ProviderError(
                self.SOURCE_NAME,
                message=f"Respuesta inesperada: se esperaba lista, llegó {type(items).__name__}",
            )

        properties = []
        for item in items[: self.max_results]:
            if not isinstance(item, dict):
                continue
            try:
                prop = self.parse_item(item, criteria)
            except (TypeError, ValueError, OverflowError, ValidationError) as e:
                logger.warning(
                    "Item descartado",
                    source=self.SOURCE_NAME,
                    error=str(e),
                )
                continue
            if prop is not None:
                properties.append(prop)
        return properties

    @abstractmethod
    def parse_item(self, item: dict, criteria: SearchCriteria) -> Optional[Property]:
        """Mapea un item crudo a Property (None = descartar)."""
        pass
