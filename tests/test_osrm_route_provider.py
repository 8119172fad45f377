"""Unit tests for the OSRM route provider."""
import httpx
import pytest

from core.errors import RouteUnavailableError, ServiceError
from models.trip import Coordinate
from routing.osrm_route_provider import OSRMRouteProvider

ORIGIN = Coordinate(latitude=45.8992, longitude=6.1294)
LYON = Coordinate(latitude=45.7640, longitude=4.8357)


def osrm_body(coordinates=None, distance=140000, duration=6000):
    if coordinates is None:
        coordinates = [[6.1294, 45.8992], [5.5, 45.8], [4.8357, 45.7640]]
    return {
        'code': 'Ok',
        'routes': [{
            'distance': distance,
            'duration': duration,
            'geometry': {'type': 'LineString', 'coordinates': coordinates},
        }],
    }


def provider_for(handler) -> OSRMRouteProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OSRMRouteProvider(osrm_url="http://osrm.test/", client=client)


class TestOSRMRouteProvider:
    def setup_method(self):
        self.requests = []

    def _respond(self, status_code=200, json=None, content=None):
        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=json)
        return handler

    @pytest.mark.asyncio
    async def test_request_uses_lon_lat_order(self):
        provider = provider_for(self._respond(json=osrm_body()))

        await provider.route(ORIGIN, LYON)

        request = self.requests[0]
        assert request.url.path == "/route/v1/driving/6.1294,45.8992;4.8357,45.764"
        assert request.url.params['overview'] == 'full'
        assert request.url.params['geometries'] == 'geojson'

    @pytest.mark.asyncio
    async def test_path_points_are_lat_lon(self):
        provider = provider_for(self._respond(json=osrm_body()))

        route = await provider.route(ORIGIN, LYON)

        assert route.path_points[0] == Coordinate(latitude=45.8992, longitude=6.1294)
        assert route.path_points[1] == Coordinate(latitude=45.8, longitude=5.5)
        assert route.path_points[-1] == Coordinate(latitude=45.7640, longitude=4.8357)
        assert route.lat_lon_path()[1] == [45.8, 5.5]

    @pytest.mark.asyncio
    async def test_units_are_converted(self):
        provider = provider_for(self._respond(json=osrm_body(distance=140000, duration=6000)))

        route = await provider.route(ORIGIN, LYON)

        assert route.distance_meters == 140000
        assert route.distance_km == 140.0
        assert route.duration_minutes == 100

    @pytest.mark.asyncio
    async def test_duration_rounds_to_nearest_minute(self):
        provider = provider_for(self._respond(json=osrm_body(duration=6095)))

        route = await provider.route(ORIGIN, LYON)

        assert route.duration_minutes == 102

    @pytest.mark.asyncio
    async def test_no_route_code_with_http_400(self):
        provider = provider_for(self._respond(400, json={'code': 'NoRoute', 'message': 'Impossible route'}))

        with pytest.raises(RouteUnavailableError):
            await provider.route(ORIGIN, LYON)

    @pytest.mark.asyncio
    async def test_ok_without_routes(self):
        provider = provider_for(self._respond(json={'code': 'Ok', 'routes': []}))

        with pytest.raises(RouteUnavailableError):
            await provider.route(ORIGIN, LYON)

    @pytest.mark.asyncio
    async def test_non_json_body(self):
        provider = provider_for(self._respond(502, content=b"<html>Bad Gateway</html>"))

        with pytest.raises(ServiceError):
            await provider.route(ORIGIN, LYON)

    @pytest.mark.asyncio
    async def test_body_without_code(self):
        provider = provider_for(self._respond(json={'routes': []}))

        with pytest.raises(ServiceError):
            await provider.route(ORIGIN, LYON)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {'code': 'Ok', 'routes': [{'distance': 10, 'duration': 10}]},
        {'code': 'Ok', 'routes': [{'distance': 'far', 'duration': 10, 'geometry': {'coordinates': [[1, 2]]}}]},
        {'code': 'Ok', 'routes': [{'distance': 10, 'duration': 10, 'geometry': {'coordinates': []}}]},
        {'code': 'Ok', 'routes': [{'distance': 10, 'duration': 10, 'geometry': {'coordinates': [[200, 95]]}}]},
        {'code': 'Ok', 'routes': [{'distance': -1, 'duration': 10, 'geometry': {'coordinates': [[1, 2]]}}]},
    ])
    async def test_malformed_route_is_service_error(self, body):
        provider = provider_for(self._respond(json=body))

        with pytest.raises(ServiceError):
            await provider.route(ORIGIN, LYON)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("distance, duration", [("NaN", "60"), ("140000", "NaN"), ("Infinity", "60")])
    async def test_non_finite_totals_are_service_error(self, distance, duration):
        body = (
            '{"code":"Ok","routes":[{"distance":%s,"duration":%s,'
            '"geometry":{"type":"LineString","coordinates":[[6.1294,45.8992],[4.8357,45.764]]}}]}'
            % (distance, duration)
        )
        provider = provider_for(self._respond(content=body.encode()))

        with pytest.raises(ServiceError):
            await provider.route(ORIGIN, LYON)

    @pytest.mark.asyncio
    async def test_timeout_is_service_error(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        provider = provider_for(handler)

        with pytest.raises(ServiceError):
            await provider.route(ORIGIN, LYON)
