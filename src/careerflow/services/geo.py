"""Distance math and geocoding against OpenStreetMap Nominatim.

The pure helpers (``distance_km``, ``format_distance``) are used by the
scorer. The async lookups take an ``httpx.AsyncClient`` so callers own the
connection pool, and raise :class:`GeocodeNotFound` or
:class:`GeocodeUnavailable`; neither is ever fatal to matching.
"""

import logging
import math

import httpx

from careerflow.core.exceptions import GeocodeNotFound, GeocodeUnavailable
from careerflow.schemas.geo import Coordinates

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
NOMINATIM_URL = "https://nominatim.openstreetmap.org"


def distance_km(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two points using the haversine formula."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    # Rounding can push h a hair outside [0, 1] near the poles and antipodes
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))


def format_distance(km: float) -> str:
    if km < 1:
        return f"{round(km * 1000)} m"
    if km < 10:
        return f"{km:.1f} km"
    return f"{round(km)} km"


async def _get_json(
    client: httpx.AsyncClient,
    url: str,
    params: dict[str, str | float | int],
    retries: int,
) -> object:
    attempts = max(0, retries) + 1
    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            response = await client.get(url, params=params)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            last_error = e
            logger.warning(
                "Geocoding request to %s failed (attempt %d/%d): %s", url, attempt, attempts, e
            )
    raise GeocodeUnavailable(f"Geocoding provider unavailable: {last_error}") from last_error


async def geocode(
    client: httpx.AsyncClient,
    place_name: str,
    base_url: str = NOMINATIM_URL,
    retries: int = 1,
) -> Coordinates:
    """Resolve a free-text place to coordinates."""
    query = place_name.strip()
    if not query:
        raise GeocodeNotFound("Empty place name")

    data = await _get_json(
        client,
        f"{base_url.rstrip('/')}/search",
        {"format": "json", "q": query, "limit": 1},
        retries,
    )
    if not isinstance(data, list) or not data:
        raise GeocodeNotFound(f"No coordinates found for '{query}'")

    try:
        return Coordinates(latitude=float(data[0]["lat"]), longitude=float(data[0]["lon"]))
    except (KeyError, TypeError, ValueError) as e:
        raise GeocodeUnavailable(f"Malformed geocoding response for '{query}'") from e


async def reverse_geocode(
    client: httpx.AsyncClient,
    coords: Coordinates,
    base_url: str = NOMINATIM_URL,
    retries: int = 1,
) -> str:
    """Best-effort "City, State" label for a coordinate pair."""
    data = await _get_json(
        client,
        f"{base_url.rstrip('/')}/reverse",
        {"format": "json", "lat": coords.latitude, "lon": coords.longitude},
        retries,
    )
    address = data.get("address") if isinstance(data, dict) else None
    if not isinstance(address, dict):
        raise GeocodeNotFound(f"No place found at {coords.latitude}, {coords.longitude}")

    locality = address.get("city") or address.get("town") or address.get("village")
    state = address.get("state")
    if locality and state:
        return f"{locality}, {state}"

    label = locality or state or address.get("country")
    if not label:
        raise GeocodeNotFound(f"No place found at {coords.latitude}, {coords.longitude}")
    return label
