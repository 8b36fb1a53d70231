"""
Ranking y diversificación.

rank() ordena por score (desc) y precio (asc). diversify() recorta el set
a max_results eligiendo de forma greedy candidatos que aporten variedad de
precio, tipo y dormitorios, y si no, el de mejor score.
"""

import statistics
from bisect import bisect_right
from datetime import datetime
from typing import Optional

from vitrina.models import Property, ScoredProperty, SearchCriteria
from vitrina.ranking.scorer import score_property

DEFAULT_MAX_RESULTS = 15

# Mientras haya menos elegidos que esto, se prioriza cubrir cuartiles de precio
PRICE_QUARTILE_SLOTS = 5


def sort_scored(scored: list[ScoredProperty]) -> list[ScoredProperty]:
    """Score descendente; empates por precio ascendente."""
    return sorted(scored, key=lambda s: (-s.score, s.listing.price))


def rank(
    properties: list[Property],
    criteria: SearchCriteria,
    now: Optional[datetime] = None,
) -> list[ScoredProperty]:
    """Puntúa y ordena las propiedades."""
    scored = [
        ScoredProperty(listing=prop, score=score_property(prop, criteria, now))
        for prop in properties
    ]
    return sort_scored(scored)


def price_quartile_cuts(prices: list[float]) -> list[float]:
    """
    Puntos de corte de los cuartiles de precio.

    Se calculan sobre los precios ordenados, así que no dependen del orden
    de iteración del set de candidatos.
    """
    if len(prices) < 2:
        return []
    return statistics.quantiles(sorted(prices), n=4, method="inclusive")


def price_quartile(price: float, cuts: list[float]) -> int:
    """Índice de cuartil 0..3."""
    return bisect_right(cuts, price)


def diversify(
    ranked: list[ScoredProperty],
    criteria: SearchCriteria,
    max_results: int = DEFAULT_MAX_RESULTS,
) -> list[ScoredProperty]:
    """
    Selecciona hasta max_results propiedades variadas.

    Solo actúa si hay más candidatos que max_results. En cada iteración
    elige, en orden de prioridad:
    1. Con menos de 5 elegidos: un cuartil de precio no representado
    2. Si los criterios no fijan tipo: un tipo de unidad no representado
    3. Una cantidad de dormitorios no representada
    4. El de mejor score restante

    El pool restante se mantiene ordenado por score, así que entre
    candidatos igual de diversos gana siempre el de mejor calidad.
    """
    if max_results <= 0:
        return []
    if len(ranked) <= max_results:
        return list(ranked)

    pool = sort_scored(ranked)
    cuts = price_quartile_cuts([s.listing.price for s in pool])

    chosen: list[ScoredProperty] = []
    quartiles: set[int] = set()
    types: set = set()
    bedrooms: set[int] = set()

    while pool and len(chosen) < max_results:
        pick = None

        if len(chosen) < PRICE_QUARTILE_SLOTS:
            pick = _first(pool, lambda s: price_quartile(s.listing.price, cuts) not in quartiles)

        if pick is None and not criteria.pins_property_type:
            pick = _first(pool, lambda s: s.listing.property_type not in types)

        if pick is None:
            pick = _first(pool, lambda s: s.listing.bedrooms not in bedrooms)

        if pick is None:
            pick = 0

        selected = pool.pop(pick)
        chosen.append(selected)
        quartiles.add(price_quartile(selected.listing.price, cuts))
        types.add(selected.listing.property_type)
        bedrooms.add(selected.listing.bedrooms)

    return chosen


def _first(pool: list[ScoredProperty], predicate) -> Optional[int]:
    for index, candidate in enumerate(pool):
        if predicate(candidate):
            return index
    return None
