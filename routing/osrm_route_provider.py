"""Get OSRM driving routes normalized to (latitude, longitude) order."""
from typing import Dict, List, Optional

import httpx
from loguru import logger

from configurations.config import Config
from core.errors import RouteUnavailableError, ServiceError
from models.trip import Coordinate, Route


class OSRMRouteProvider:
    def __init__(self, osrm_url: str = Config.OSRM_URL,
                 timeout: float = Config.HTTP_TIMEOUT_SECONDS,
                 client: Optional[httpx.AsyncClient] = None):
        self.osrm_url = osrm_url.rstrip('/')
        self.timeout = timeout
        self.client = client

    async def route(self, origin: Coordinate, destination: Coordinate) -> Route:
        """Get the full-geometry driving route between two points."""
        # Format coordinates for OSRM (lon,lat)
        coord_string = f"{origin.longitude},{origin.latitude};{destination.longitude},{destination.latitude}"
        url = f"{self.osrm_url}/route/v1/driving/{coord_string}"
        params = {
            'overview': 'full',
            'geometries': 'geojson'
        }

        logger.info(f"Requesting OSRM route {coord_string}")
        try:
            response = await self._get(url, params)
        except httpx.HTTPError as e:
            logger.error(f"OSRM request failed: {e}")
            raise ServiceError(f"Routing request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"OSRM returned a non-JSON body (HTTP {response.status_code})")
            raise ServiceError(f"Malformed routing response (HTTP {response.status_code})") from e

        # OSRM reports NoRoute and friends with a 4xx status and a code in the body
        code = data.get('code') if isinstance(data, dict) else None
        if code is None:
            raise ServiceError(f"Routing response without status code (HTTP {response.status_code})")
        if code != 'Ok':
            logger.warning(f"OSRM returned error: {code} {data.get('message', '')}".rstrip())
            raise RouteUnavailableError(f"OSRM status {code}")
        if not data.get('routes'):
            logger.warning("OSRM returned no routes")
            raise RouteUnavailableError("OSRM returned no routes")

        return self._process_osrm_response(data)

    def _process_osrm_response(self, data: Dict) -> Route:
        """Convert the first OSRM route into a Route."""
        try:
            route = data['routes'][0]
            path_points = self._to_lat_lon(route['geometry']['coordinates'])
            distance = float(route['distance'])
            duration = float(route['duration'])
            result = Route(path_points=path_points, distance_meters=distance, duration_seconds=duration)
        except (KeyError, IndexError, TypeError, ValueError) as e:
            logger.error(f"Error parsing OSRM response: {e}")
            raise ServiceError("Malformed routing response") from e

        logger.info(f"Route: {result.distance_km:.1f} km, {result.duration_minutes} min, "
                    f"{len(path_points)} points")
        return result

    def _to_lat_lon(self, geojson_coords: List[List[float]]) -> tuple:
        """Flip GeoJSON [lon, lat] pairs into Coordinates."""
        if not geojson_coords:
            raise ValueError("Empty route geometry")
        return tuple(
            Coordinate(latitude=float(lat), longitude=float(lon))
            for lon, lat, *_ in geojson_coords
        )

    async def _get(self, url: str, params: dict) -> httpx.Response:
        if self.client is not None:
            return await self.client.get(url, params=params, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, params=params)
