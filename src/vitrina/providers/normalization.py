"""
Normalización de campos crudos de proveedores.

Los proveedores devuelven números como strings ("$1,250/mo"), campos
ausentes o tipos en su propio vocabulario. Estas funciones nunca lanzan:
un dato ausente o ilegible se convierte en cero / None.
"""

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from vitrina.models import ListingType, PropertyType

# Tokens confiables por tipo de unidad. Lo que no está acá se trata como casa.
PROPERTY_TYPE_TOKENS: dict[str, PropertyType] = {
    "house": PropertyType.HOUSE,
    "houses": PropertyType.HOUSE,
    "single_family": PropertyType.HOUSE,
    "single family": PropertyType.HOUSE,
    "single-family": PropertyType.HOUSE,
    "apartment": PropertyType.APARTMENT,
    "apartments": PropertyType.APARTMENT,
    "apartment_unit": PropertyType.APARTMENT,
    "condo": PropertyType.CONDO,
    "condos": PropertyType.CONDO,
    "condominium": PropertyType.CONDO,
    "townhouse": PropertyType.TOWNHOUSE,
    "townhouses": PropertyType.TOWNHOUSE,
    "townhome": PropertyType.TOWNHOUSE,
    "townhomes": PropertyType.TOWNHOUSE,
}

LISTING_TYPE_TOKENS: dict[str, ListingType] = {
    "for_rent": ListingType.RENT,
    "forrent": ListingType.RENT,
    "for rent": ListingType.RENT,
    "rent": ListingType.RENT,
    "rental": ListingType.RENT,
    "for_sale": ListingType.BUY,
    "forsale": ListingType.BUY,
    "for sale": ListingType.BUY,
    "sale": ListingType.BUY,
    "buy": ListingType.BUY,
}


def parse_price(value) -> float:
    """'$1,250/mo' -> 1250.0. Ilegible o ausente -> 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            price = float(value)
        except OverflowError:
            return 0.0
        return max(price, 0.0) if math.isfinite(price) else 0.0
    match = re.search(r"\d[\d,]*(?:\.\d+)?", str(value))
    if not match:
        return 0.0
    try:
        price = float(match.group(0).replace(",", ""))
    except ValueError:
        return 0.0
    return price if math.isfinite(price) else 0.0


def parse_int(value, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    match = re.search(r"\d[\d,]*", str(value))
    if not match:
        return default
    return int(match.group(0).replace(",", ""))


def parse_optional_int(value) -> Optional[int]:
    """Como parse_int pero None si no hay dato o es cero."""
    parsed = parse_int(value, default=0)
    return parsed or None


def parse_float(value, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        parsed = float(value)
    except OverflowError:
        return default
    except (TypeError, ValueError):
        match = re.search(r"\d+(?:\.\d+)?", str(value))
        if not match:
            return default
        parsed = float(match.group(0))
    return parsed if math.isfinite(parsed) else default


def parse_date(value, now: Optional[datetime] = None) -> datetime:
    """ISO string / epoch ms -> datetime UTC. Ilegible -> now."""
    now = now or datetime.now(timezone.utc)
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return now
    if isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return now
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return now


def date_from_days_on_market(days, now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    if days is None or isinstance(days, bool):
        return now
    try:
        return now - timedelta(days=max(0.0, float(days)))
    except (TypeError, ValueError, OverflowError):
        return now


def split_address(raw: Optional[str]) -> dict[str, str]:
    """'123 Main St, Columbus, OH 43215' -> street / city / state / zip_code."""
    parts = [p.strip() for p in (raw or "").split(",") if p.strip()]
    data = {"street": "", "city": "", "state": "", "zip_code": ""}
    if not parts:
        return data
    data["street"] = parts[0]
    if len(parts) >= 2:
        data["city"] = parts[1]
    if len(parts) >= 3:
        match = re.match(r"([A-Za-z]{2})(?![A-Za-z])\s*(\d{5})?", parts[2])
        if match:
            data["state"] = match.group(1).upper()
            data["zip_code"] = match.group(2) or ""
        else:
            # Estado escrito completo: "Ohio 43215"
            zip_match = re.search(r"\b(\d{5})\b", parts[2])
            data["state"] = parts[2][: zip_match.start()].strip() if zip_match else parts[2]
            data["zip_code"] = zip_match.group(1) if zip_match else ""
    return data


def resolve_property_type(raw: Optional[str]) -> PropertyType:
    """
    Mapea el tipo del proveedor a PropertyType.

    Sesgo conservador: un tipo ausente o ambiguo se toma como HOUSE, así
    un filtro estricto ("solo departamentos") lo excluye en vez de dejar
    pasar un falso positivo.
    """
    if not raw:
        return PropertyType.HOUSE
    token = str(raw).strip().lower()
    return PROPERTY_TYPE_TOKENS.get(token, PropertyType.HOUSE)


def resolve_listing_type(raw: Optional[str], default: ListingType = ListingType.BUY) -> ListingType:
    if not raw:
        return default
    return LISTING_TYPE_TOKENS.get(str(raw).strip().lower(), default)


def criteria_listing_type(listing_type: ListingType) -> ListingType:
    """Tipo de operación a consultar cuando los criterios aceptan ambos."""
    return ListingType.BUY if listing_type == ListingType.ANY else listing_type
