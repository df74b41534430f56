import httpx
from fastapi import APIRouter, Depends, Query

from careerflow.api.deps import get_http_client, get_settings
from careerflow.core.config import Settings
from careerflow.core.exceptions import (
    GeocodeNotFound,
    GeocodeUnavailable,
    NotFoundError,
    ServiceUnavailableError,
)
from careerflow.schemas.geo import Coordinates, GeocodeResponse, ReverseGeocodeResponse
from careerflow.services import geo

router = APIRouter(prefix="/geo", tags=["geo"])


@router.get("/geocode", response_model=GeocodeResponse)
async def geocode_place(
    q: str = Query(..., min_length=1, max_length=200),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> GeocodeResponse:
    try:
        coords = await geo.geocode(
            http_client, q, base_url=settings.geocoding_base_url, retries=settings.geocoding_retries
        )
    except GeocodeNotFound as e:
        raise NotFoundError("Place", q) from e
    except GeocodeUnavailable as e:
        raise ServiceUnavailableError("Geocoding service unavailable") from e
    return GeocodeResponse(query=q, coordinates=coords)


@router.get("/reverse", response_model=ReverseGeocodeResponse)
async def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
) -> ReverseGeocodeResponse:
    coords = Coordinates(latitude=lat, longitude=lon)
    try:
        location = await geo.reverse_geocode(
            http_client,
            coords,
            base_url=settings.geocoding_base_url,
            retries=settings.geocoding_retries,
        )
    except GeocodeNotFound as e:
        raise NotFoundError("Place", f"{lat},{lon}") from e
    except GeocodeUnavailable as e:
        raise ServiceUnavailableError("Geocoding service unavailable") from e
    return ReverseGeocodeResponse(coordinates=coords, location=location)
