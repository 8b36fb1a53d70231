"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Encontrar la raíz del proyecto (donde está el .env)
# config.py -> vitrina/ -> src/ -> raíz del proyecto
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Modo de búsqueda
    use_mock_data: bool = Field(
        False, description="Usar solo datos sintéticos, sin llamar a proveedores reales"
    )
    strict_mode: bool = Field(
        False, description="Fallar si los proveedores reales no devuelven resultados"
    )
    provider_timeout_seconds: float = Field(
        30.0, gt=0, description="Timeout independiente por llamada a proveedor"
    )
    max_results_per_provider: int = Field(
        50, ge=1, description="Máximo de listings pedidos a cada proveedor"
    )

    # Cache
    cache_ttl_seconds: float = Field(600.0, gt=0, description="TTL de cada entrada (segundos)")
    cache_max_entries: int = Field(100, ge=1, description="Capacidad máxima del cache")

    # Ranking
    max_results: int = Field(15, ge=0, description="Tope de resultados diversificados")

    # Zillow (RapidAPI)
    zillow_api_key: Optional[str] = Field(None, description="API key de RapidAPI para Zillow")
    zillow_api_host: str = Field(
        "zillow-com1.p.rapidapi.com", description="Host RapidAPI de Zillow"
    )

    # Apify
    apify_api_token: Optional[str] = Field(None, description="Token de la API de Apify")
    apify_actor_id: str = Field(
        "petr_cermak/real-estate-scraper", description="Actor de Apify a ejecutar"
    )
    apify_base_url: str = Field("https://api.apify.com/v2", description="URL base de Apify")
    apify_poll_interval_seconds: float = Field(
        2.0, gt=0, description="Intervalo de polling del estado del run"
    )

    # Generador sintético
    synthetic_seed: Optional[int] = Field(
        None, description="Semilla fija (None = derivada de los criterios)"
    )
    synthetic_latency_seconds: float = Field(
        0.0, ge=0, description="Latencia simulada del proveedor sintético"
    )
    synthetic_min_count: int = Field(5, ge=1, description="Mínimo de listings sintéticos")
    synthetic_max_count: int = Field(20, ge=1, description="Máximo de listings sintéticos")

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")

    def has_zillow_config(self) -> bool:
        return bool(self.zillow_api_key)

    def has_apify_config(self) -> bool:
        return bool(self.apify_api_token)


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Constantes del sistema

# Amenities que suman bonus de calidad en el score
PREMIUM_FEATURES = ["pool", "gym", "concierge", "doorman", "rooftop", "garage"]

# Precio de referencia por pie cuadrado (USD)
REFERENCE_PRICE_PER_SQFT = {
    "rent": 1.5,  # mensual
    "buy": 200.0,
}

# Vocabulario de features que usa el generador sintético
SYNTHETIC_FEATURES = [
    "Pool",
    "Garage",
    "Garden",
    "Fireplace",
    "Balcony",
    "Gym",
    "Pet-friendly",
    "In-unit laundry",
    "Air conditioning",
    "Hardwood floors",
    "Dishwasher",
    "Rooftop",
]

SYNTHETIC_STREETS = [
    "Main St",
    "Oak Ave",
    "Pine Rd",
    "Elm Dr",
    "Maple Ln",
    "Cedar Blvd",
    "Park Way",
    "High St",
    "Lake Shore Dr",
    "Broad St",
]
