"""
Módulo de proveedores.

Provee adaptadores para las distintas fuentes de listings.
"""

from vitrina.providers.base import BaseProvider, HttpProvider
from vitrina.providers.feature_detector import KeywordFeatureDetector
from vitrina.providers.zillow import ZillowProvider
from vitrina.providers.apify import ApifyProvider
from vitrina.providers.synthetic import SyntheticProvider
from vitrina.providers.factory import build_providers, build_synthetic_provider

__all__ = [
    "BaseProvider",
    "HttpProvider",
    "KeywordFeatureDetector",
    "ZillowProvider",
    "ApifyProvider",
    "SyntheticProvider",
    "build_providers",
    "build_synthetic_provider",
]
