"""Unit tests for distance math and Nominatim geocoding."""

import httpx
import pytest

from careerflow.core.exceptions import GeocodeNotFound, GeocodeUnavailable
from careerflow.schemas.geo import Coordinates
from careerflow.services import geo

SF = Coordinates(latitude=37.7749, longitude=-122.4194)
LA = Coordinates(latitude=34.0522, longitude=-118.2437)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.unit
class TestDistance:
    def test_same_point_is_zero(self) -> None:
        assert geo.distance_km(SF, SF) == 0.0

    def test_symmetric(self) -> None:
        assert geo.distance_km(SF, LA) == pytest.approx(geo.distance_km(LA, SF))

    def test_known_distance(self) -> None:
        assert geo.distance_km(SF, LA) == pytest.approx(559, abs=2)

    def test_antipodes_do_not_fail(self) -> None:
        a = Coordinates(latitude=0.0, longitude=0.0)
        b = Coordinates(latitude=0.0, longitude=180.0)
        assert geo.distance_km(a, b) == pytest.approx(20015, abs=5)

    @pytest.mark.parametrize(
        ("km", "label"),
        [(0.85, "850 m"), (0.0, "0 m"), (3.24, "3.2 km"), (9.96, "10.0 km"), (150.4, "150 km")],
    )
    def test_format_distance(self, km: float, label: str) -> None:
        assert geo.format_distance(km) == label


@pytest.mark.unit
class TestGeocode:
    async def test_geocode_found(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/search"
            assert request.url.params["q"] == "San Francisco"
            assert request.url.params["format"] == "json"
            return httpx.Response(200, json=[{"lat": "37.7749", "lon": "-122.4194"}])

        async with _client(handler) as client:
            coords = await geo.geocode(client, " San Francisco ", base_url="https://geo.test")

        assert coords == SF

    async def test_geocode_no_results(self) -> None:
        async with _client(lambda r: httpx.Response(200, json=[])) as client:
            with pytest.raises(GeocodeNotFound):
                await geo.geocode(client, "Atlantis", base_url="https://geo.test")

    async def test_geocode_blank_input_skips_request(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=[])

        async with _client(handler) as client:
            with pytest.raises(GeocodeNotFound):
                await geo.geocode(client, "   ", base_url="https://geo.test")
        assert calls == []

    async def test_geocode_retries_then_unavailable(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        async with _client(handler) as client:
            with pytest.raises(GeocodeUnavailable):
                await geo.geocode(client, "Paris", base_url="https://geo.test", retries=2)
        assert len(calls) == 3

    async def test_geocode_recovers_on_retry(self) -> None:
        responses = [httpx.Response(500), httpx.Response(200, json=[{"lat": "1", "lon": "2"}])]

        async with _client(lambda r: responses.pop(0)) as client:
            coords = await geo.geocode(client, "Somewhere", base_url="https://geo.test", retries=1)

        assert coords == Coordinates(latitude=1.0, longitude=2.0)

    async def test_geocode_malformed_payload(self) -> None:
        async with _client(lambda r: httpx.Response(200, json=[{"name": "x"}])) as client:
            with pytest.raises(GeocodeUnavailable):
                await geo.geocode(client, "Paris", base_url="https://geo.test")


@pytest.mark.unit
class TestReverseGeocode:
    async def test_city_and_state(self) -> None:
        payload = {"address": {"town": "Palo Alto", "state": "California", "country": "US"}}
        async with _client(lambda r: httpx.Response(200, json=payload)) as client:
            label = await geo.reverse_geocode(client, SF, base_url="https://geo.test")
        assert label == "Palo Alto, California"

    async def test_falls_back_to_country(self) -> None:
        payload = {"address": {"country": "Iceland"}}
        async with _client(lambda r: httpx.Response(200, json=payload)) as client:
            label = await geo.reverse_geocode(client, SF, base_url="https://geo.test")
        assert label == "Iceland"

    async def test_nothing_found(self) -> None:
        payload = {"error": "Unable to geocode"}
        async with _client(lambda r: httpx.Response(200, json=payload)) as client:
            with pytest.raises(GeocodeNotFound):
                await geo.reverse_geocode(client, SF, base_url="https://geo.test")
