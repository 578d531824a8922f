"""
Forward geocoding against a Nominatim-compatible search endpoint.

Used only when a listing is saved without a map pin.
"""
import logging
from decimal import Decimal, InvalidOperation

import httpx
from django.conf import settings

logger = logging.getLogger(__name__)

COORD_PRECISION = Decimal("0.000001")


class GeocodingError(Exception):
    """Raised when the geocoding service cannot be reached or answers garbage."""


def build_query(location, country):
    """'location, country', or whichever of the two is present; '' when neither is."""
    parts = [p.strip() for p in (location or "", country or "") if p and p.strip()]
    return ", ".join(parts)


def geocode(query):
    """
    Return (latitude, longitude) Decimals for the best match, or None when nothing matches.
    """
    url = getattr(settings, "GEOCODER_URL", "https://nominatim.openstreetmap.org/search")
    timeout = float(getattr(settings, "GEOCODER_TIMEOUT", 5.0))
    headers = {"User-Agent": getattr(settings, "GEOCODER_USER_AGENT", "carcruise/1.0")}

    try:
        response = httpx.get(
            url,
            params={"format": "json", "q": query, "limit": 1},
            headers=headers,
            timeout=timeout,
        )
        response.raise_for_status()
        results = response.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Geocoding failed for %r: %s", query, exc)
        raise GeocodingError(str(exc)) from exc

    if not results:
        logger.info("No geocoding results for %r", query)
        return None

    first = results[0]
    try:
        lat = Decimal(str(first["lat"])).quantize(COORD_PRECISION)
        lon = Decimal(str(first["lon"])).quantize(COORD_PRECISION)
    except (KeyError, TypeError, InvalidOperation) as exc:
        raise GeocodingError(f"Malformed geocoding result: {first!r}") from exc
    return lat, lon
