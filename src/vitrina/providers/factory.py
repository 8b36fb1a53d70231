"""Construcción de proveedores a partir de la configuración."""

from typing import Optional

import structlog

from vitrina.config import Settings, get_settings
from vitrina.providers.apify import ApifyProvider
from vitrina.providers.base import BaseProvider
from vitrina.providers.synthetic import SyntheticProvider
from vitrina.providers.zillow import ZillowProvider

logger = structlog.get_logger()


def build_providers(settings: Optional[Settings] = None) -> list[BaseProvider]:
    """
    Instancia los proveedores reales que tienen credenciales.

    En modo mock devuelve una lista vacía: el agregador usa entonces
    solo el generador sintético.
    """
    settings = settings or get_settings()
    if settings.use_mock_data:
        logger.info("Modo mock activo, sin proveedores reales")
        return []

    common = {
        "timeout_seconds": settings.provider_timeout_seconds,
        "max_results": settings.max_results_per_provider,
    }
    providers: list[BaseProvider] = []

    if settings.has_zillow_config():
        providers.append(
            ZillowProvider(
                api_key=settings.zillow_api_key,
                api_host=settings.zillow_api_host,
                **common,
            )
        )

    if settings.has_apify_config():
        providers.append(
            ApifyProvider(
                api_token=settings.apify_api_token,
                actor_id=settings.apify_actor_id,
                base_url=settings.apify_base_url,
                poll_interval_seconds=settings.apify_poll_interval_seconds,
                **common,
            )
        )

    if not providers:
        logger.warning("No hay proveedores con credenciales configuradas")
    return providers


def build_synthetic_provider(settings: Optional[Settings] = None) -> SyntheticProvider:
    settings = settings or get_settings()
    return SyntheticProvider(
        seed=settings.synthetic_seed,
        min_count=settings.synthetic_min_count,
        max_count=settings.synthetic_max_count,
        latency_seconds=settings.synthetic_latency_seconds,
    )
