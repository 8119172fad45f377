"""Geocoding service resolving place names through Nominatim."""
from typing import Optional

import httpx
from loguru import logger

from configurations.config import Config
from core.errors import EmptyQueryError, NotFoundError, ServiceError
from models.trip import Coordinate


class NominatimGeocoder:
    def __init__(self, base_url: str = Config.NOMINATIM_URL,
                 timeout: float = Config.HTTP_TIMEOUT_SECONDS,
                 user_agent: str = Config.HTTP_USER_AGENT,
                 client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.user_agent = user_agent
        self.client = client

    async def resolve(self, query: str) -> Coordinate:
        """Return the coordinate of the best match for a free-text place name."""
        text = (query or "").strip()
        if not text:
            raise EmptyQueryError()

        url = f"{self.base_url}/search"
        params = {'format': 'json', 'q': text}
        headers = {'User-Agent': self.user_agent, 'Accept': 'application/json'}

        logger.info(f"Geocoding destination: '{text}'")
        try:
            response = await self._get(url, params, headers)
            response.raise_for_status()
            candidates = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Geocoding request failed for '{text}': {e}")
            raise ServiceError(f"Geocoding request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Geocoding response for '{text}' is not JSON")
            raise ServiceError("Malformed geocoding response") from e

        if not isinstance(candidates, list):
            raise ServiceError(f"Unexpected geocoding payload: {type(candidates).__name__}")
        if not candidates:
            logger.warning(f"No geocoding match for '{text}'")
            raise NotFoundError(f"No match for '{text}'")

        best = candidates[0]
        try:
            coordinate = Coordinate(latitude=float(best['lat']), longitude=float(best['lon']))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Could not parse geocoding candidate for '{text}': {best!r}")
            raise ServiceError("Malformed geocoding candidate") from e

        logger.info(f"Resolved '{text}' to {coordinate.latitude:.4f}, {coordinate.longitude:.4f}")
        return coordinate

    async def _get(self, url: str, params: dict, headers: dict) -> httpx.Response:
        if self.client is not None:
            return await self.client.get(url, params=params, headers=headers, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, params=params, headers=headers)
