from pydantic import Field

from careerflow.schemas import APIModel


class Coordinates(APIModel):
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class GeocodeResponse(APIModel):
    query: str
    coordinates: Coordinates


class ReverseGeocodeResponse(APIModel):
    coordinates: Coordinates
    location: str
