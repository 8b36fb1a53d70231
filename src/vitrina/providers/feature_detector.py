"""
Detección genérica de features por texto libre.

Se usa como complemento cuando el proveedor no expone bien las
características estructuradas, pero sí aparecen en la descripción.
"""

import re
import unicodedata
from typing import Iterable


class KeywordFeatureDetector:
    """Detector simple basado en keywords + negaciones cercanas."""

    # Tag canónico -> patrones
    FEATURE_PATTERNS: dict[str, list[str]] = {
        "Pool": [r"\bpool\b", r"\bswimming pool\b", r"\bplunge pool\b"],
        "Garage": [r"\bgarages?\b", r"\bcarport\b", r"\bcovered parking\b"],
        "Gym": [r"\bgym\b", r"\bfitness (?:center|room|centre)\b", r"\bexercise room\b"],
        "Fireplace": [r"\bfireplaces?\b", r"\bwood[- ]burning stove\b"],
        "Balcony": [r"\bbalcon(?:y|ies)\b", r"\bterrace\b"],
        "Garden": [r"\bgardens?\b", r"\bbackyard\b", r"\bfenced yard\b"],
        "Pet-friendly": [r"\bpet[- ]friendly\b", r"\bpets? (?:allowed|welcome|ok)\b", r"\bdogs? (?:allowed|welcome)\b"],
        "In-unit laundry": [r"\bin[- ]unit (?:laundry|washer)\b", r"\bwasher(?:/| and | & )dryer\b", r"\blaundry room\b"],
        "Air conditioning": [r"\bair conditioning\b", r"\bcentral air\b", r"\ba/c\b"],
        "Concierge": [r"\bconcierge\b"],
        "Doorman": [r"\bdoorm[ae]n\b", r"\bdoor staff\b"],
        "Rooftop": [r"\brooftop\b", r"\broof deck\b"],
        "Dishwasher": [r"\bdishwashers?\b"],
        "Hardwood floors": [r"\bhardwood(?: floors?| flooring)?\b"],
    }

    NEGATION_PATTERNS: list[str] = [
        r"\bno\b",
        r"\bnot\b",
        r"\bwithout\b",
        r"\bnon\b",
        r"\blacks?\b",
        r"\bprohibited\b",
        r"\bnot allowed\b",
    ]

    FEATURE_EXCLUSION_PATTERNS: dict[str, list[str]] = {
        # "cerca de un pool/gym" no es una amenity del edificio
        "Pool": [r"\bnear(?:by)?\b", r"\bblocks? (?:from|to)\b", r"\bcommunity pool nearby\b"],
        "Gym": [r"\bnear(?:by)?\b", r"\bblocks? (?:from|to)\b", r"\bwalking distance\b"],
        "Garden": [r"\bbotanical gardens?\b", r"\bnear(?:by)?\b"],
    }

    def _normalize(self, text: str) -> str:
        normalized = unicodedata.normalize("NFKD", text or "")
        ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
        return re.sub(r"\s+", " ", ascii_text).strip().lower()

    def _split_sentences(self, text: str) -> list[str]:
        return [s.strip() for s in re.split(r"[.!?\n;:,]+", text) if s.strip()]

    def _is_negated(self, sentence: str, keyword_pattern: str) -> bool:
        for match in re.finditer(keyword_pattern, sentence, flags=re.IGNORECASE):
            start = max(0, match.start() - 30)
            window = sentence[start:match.end()]
            for neg_pattern in self.NEGATION_PATTERNS:
                if re.search(neg_pattern, window, flags=re.IGNORECASE):
                    return True
        return False

    def _is_excluded_context(self, feature: str, sentence: str) -> bool:
        for pattern in self.FEATURE_EXCLUSION_PATTERNS.get(feature, []):
            if re.search(pattern, sentence, flags=re.IGNORECASE):
                return True
        return False

    def detect_features(self, text: str) -> list[str]:
        """Devuelve los tags detectados, en el orden de FEATURE_PATTERNS."""
        sentences = self._split_sentences(self._normalize(text))

        detected = []
        for feature, patterns in self.FEATURE_PATTERNS.items():
            if self._matches_any(feature, patterns, sentences):
                detected.append(feature)
        return detected

    def _matches_any(self, feature: str, patterns: list[str], sentences: list[str]) -> bool:
        for sentence in sentences:
            if self._is_excluded_context(feature, sentence):
                continue
            for pattern in patterns:
                if re.search(pattern, sentence, flags=re.IGNORECASE):
                    if not self._is_negated(sentence, pattern):
                        return True
        return False

    def merge_features(self, structured: Iterable[str], description: str) -> tuple[str, ...]:
        """
        Une features estructuradas del proveedor con las detectadas en texto.

        Mantiene el orden (estructuradas primero) y descarta duplicados
        sin distinguir mayúsculas.
        """
        merged: list[str] = []
        seen: set[str] = set()
        for feature in list(structured) + self.detect_features(description):
            if not isinstance(feature, str):
                continue
            cleaned = feature.strip()
            key = cleaned.casefold()
            if cleaned and key not in seen:
                seen.add(key)
                merged.append(cleaned)
        return tuple(merged)
