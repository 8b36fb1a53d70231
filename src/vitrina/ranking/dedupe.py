"""
Deduplicación de listings.

Clave de identidad: dirección normalizada (casefold + strip) + precio exacto.
Es una heurística: si la misma dirección aparece con dos precios distintos
dentro de un mismo set (cambio de precio legítimo), se trata como dos
listings distintos.
"""

from vitrina.models import Property


def dedupe_key(prop: Property) -> tuple[str, float]:
    return prop.address.strip().casefold(), prop.price


def dedupe(properties: list[Property]) -> list[Property]:
    """Elimina duplicados conservando el primero encontrado y el orden relativo."""
    seen: set[tuple[str, float]] = set()
    unique = []
    for prop in properties:
        key = dedupe_key(prop)
        if key in seen:
            continue
        seen.add(key)
        unique.append(prop)
    return unique
