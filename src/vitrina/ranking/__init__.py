"""
Ranking de candidatos.

Filtros hard, deduplicación, scoring, diversificación y recomendaciones.
Todas las funciones son puras y síncronas.
"""

from vitrina.ranking.filters import filter_properties, rejection_reason
from vitrina.ranking.dedupe import dedupe, dedupe_key
from vitrina.ranking.scorer import score_property
from vitrina.ranking.ranker import DEFAULT_MAX_RESULTS, diversify, rank, sort_scored
from vitrina.ranking.recommendations import annotate, compare_to_market
from vitrina.ranking.summary import summarize

__all__ = [
    "filter_properties",
    "rejection_reason",
    "dedupe",
    "dedupe_key",
    "score_property",
    "rank",
    "sort_scored",
    "diversify",
    "DEFAULT_MAX_RESULTS",
    "annotate",
    "compare_to_market",
    "summarize",
]
