"""
Cache en memoria de resultados de búsqueda.

Clave: fingerprint normalizado de los criteria. Valor: la lista de
propiedades capturada + timestamp. Thread-safe, con TTL y capacidad
acotada.

Política de desalojo: FIFO por orden de inserción (no LRU). Un `get`
no cambia la posición de una entrada; un `put` sobre una clave existente
cuenta como inserción nueva y la mueve al final.
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Optional

import structlog

from vitrina.models import Property, SearchCriteria

logger = structlog.get_logger()


@dataclass(frozen=True)
class CacheEntry:
    """Resultado capturado. Inmutable: se reemplaza entero, nunca se edita."""

    properties: tuple[Property, ...]
    captured_at: float

    def is_expired(self, now: float, ttl_seconds: float) -> bool:
        return now - self.captured_at >= ttl_seconds


class SearchCache:
    """Cache acotado con expiración por TTL, indexado por criteria."""

    def __init__(
        self,
        ttl_seconds: float = 600.0,
        max_entries: int = 100,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Args:
            ttl_seconds: Vida de cada entrada (default: 10 minutos)
            max_entries: Capacidad máxima (default: 100)
            clock: Fuente de tiempo monotónica (inyectable para tests)
        """
        if max_entries < 1:
            raise ValueError("max_entries debe ser >= 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock or time.monotonic
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @staticmethod
    def key_for(criteria: SearchCriteria) -> str:
        return criteria.fingerprint()

    def get(self, criteria: SearchCriteria) -> Optional[list[Property]]:
        """
        Devuelve las propiedades cacheadas o None.

        Una entrada vencida se elimina en el momento y se reporta como miss.
        """
        key = self.key_for(criteria)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.is_expired(self._clock(), self.ttl_seconds):
                del self._entries[key]
                logger.debug("Entrada de cache vencida", key=key[:12])
                entry = None

            if entry is None:
                self._misses += 1
                return None

            self._hits += 1

        logger.debug("Cache HIT", key=key[:12], count=len(entry.properties))
        return list(entry.properties)

    def put(self, criteria: SearchCriteria, properties: list[Property]) -> None:
        """Guarda una copia de la lista, desalojando la entrada más vieja si hace falta."""
        key = self.key_for(criteria)
        entry = CacheEntry(properties=tuple(properties), captured_at=self._clock())
        with self._lock:
            self._entries.pop(key, None)
            self._entries[key] = entry
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Entrada de cache desalojada", key=evicted[:12])

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def stats(self) -> dict:
        with self._lock:
            total = self._hits + self._misses
            return {
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(self._hits / total, 3) if total else 0.0,
            }
