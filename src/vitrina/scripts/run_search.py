"""
Script para ejecutar una búsqueda de propiedades.

Arma los criterios a partir de flags, corre el pipeline completo e
imprime el SearchResult como JSON por stdout.

Uso:
    python -m vitrina.scripts.run_search --city Columbus --state OH \\
        --listing-type buy --property-type house --max-price 500000 \\
        --bedrooms 3 --features garage,pool [--strict] [--mock] [--max-results N]
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

import structlog
from pydantic import ValidationError

from vitrina.config import Settings, get_settings
from vitrina.exceptions import NoResultsError, VitrinaError
from vitrina.models import ListingType, PropertyType, SearchCriteria, SearchResult
from vitrina.search import SearchEngine

logger = structlog.get_logger()


def configure_logging(level: str) -> None:
    # Logs a stderr: stdout queda reservado para el JSON
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
        stream=sys.stderr,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run_search",
        description="Busca propiedades en los proveedores configurados",
    )
    parser.add_argument("--city", required=True, help="Ciudad (ej: Columbus)")
    parser.add_argument("--state", help="Estado (ej: OH)")
    parser.add_argument(
        "--listing-type",
        choices=[t.value for t in ListingType],
        default=ListingType.ANY.value,
    )
    parser.add_argument(
        "--property-type",
        choices=[t.value for t in PropertyType],
        default=PropertyType.ANY.value,
    )
    parser.add_argument("--min-price", type=float)
    parser.add_argument("--max-price", type=float)
    parser.add_argument("--bedrooms", type=int)
    parser.add_argument("--bathrooms", type=float)
    parser.add_argument("--features", default="", help="Lista separada por comas")
    parser.add_argument(
        "--strict", action="store_true", help="Fallar si no hay resultados reales"
    )
    parser.add_argument("--mock", action="store_true", help="Usar solo datos sintéticos")
    parser.add_argument("--max-results", type=int, help="Tope de resultados")
    return parser


def criteria_from_args(args: argparse.Namespace) -> SearchCriteria:
    return SearchCriteria(
        city=args.city,
        state=args.state,
        listing_type=args.listing_type,
        property_type=args.property_type,
        min_price=args.min_price,
        max_price=args.max_price,
        bedrooms=args.bedrooms,
        bathrooms=args.bathrooms,
        features=args.features,
    )


def settings_from_args(args: argparse.Namespace, settings: Settings) -> Settings:
    """Los flags solo pueden activar modos, nunca desactivar lo que pide el entorno."""
    update = {}
    if args.strict:
        update["strict_mode"] = True
    if args.mock:
        update["use_mock_data"] = True
    return settings.model_copy(update=update) if update else settings


async def run_search(
    criteria: SearchCriteria,
    settings: Settings,
    max_results: Optional[int] = None,
) -> SearchResult:
    async with SearchEngine.from_settings(settings) as engine:
        return await engine.search(criteria, max_results=max_results)


def main(argv: Optional[list[str]] = None):
    """Entry point del script."""
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args, get_settings())
    configure_logging(settings.log_level)

    try:
        criteria = criteria_from_args(args)
    except ValidationError as e:
        logger.error("Criterios inválidos", error=str(e))
        sys.exit(1)

    logger.info("Iniciando búsqueda", location=criteria.location, strict=settings.strict_mode)

    try:
        result = asyncio.run(run_search(criteria, settings, args.max_results))
    except KeyboardInterrupt:
        logger.info("Búsqueda interrumpida por usuario")
        sys.exit(130)
    except NoResultsError as e:
        logger.error("Sin resultados", error=str(e))
        sys.exit(2)
    except VitrinaError as e:
        logger.error("Error fatal en búsqueda", error=str(e))
        sys.exit(1)

    print(result.model_dump_json(indent=2))
    logger.info("Búsqueda completada", returned=result.summary.count)
    sys.exit(0)


if __name__ == "__main__":
    main()
