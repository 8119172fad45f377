"""Shared fixtures: in-memory geocoder and router doubles."""
import asyncio

import pytest

from configurations.config import TripConfig
from core.pipeline import TripEstimationPipeline
from models.trip import Coordinate, Route

ORIGIN = Coordinate(latitude=45.8992, longitude=6.1294)
LYON = Coordinate(latitude=45.7640, longitude=4.8357)
GRENOBLE = Coordinate(latitude=45.1885, longitude=5.7245)


def make_route(destination: Coordinate, distance_meters: float = 140000, duration_seconds: float = 6000) -> Route:
    midpoint = Coordinate(
        latitude=(ORIGIN.latitude + destination.latitude) / 2,
        longitude=(ORIGIN.longitude + destination.longitude) / 2,
    )
    return Route(
        path_points=(ORIGIN, midpoint, destination),
        distance_meters=distance_meters,
        duration_seconds=duration_seconds,
    )


class FakeResolver:
    """Returns canned coordinates; a query with a gate waits until it is set."""

    def __init__(self, results):
        self.results = results
        self.calls = []
        self.gates = {}

    def hold(self, query: str) -> asyncio.Event:
        self.gates[query] = asyncio.Event()
        return self.gates[query]

    async def resolve(self, query: str) -> Coordinate:
        self.calls.append(query)
        if query in self.gates:
            await self.gates[query].wait()
        result = self.results[query]
        if isinstance(result, Exception):
            raise result
        return result


class FakeRouteProvider:
    """Routes to any destination; a held destination waits, errors are per destination or global."""

    def __init__(self, routes=None, error: Exception = None):
        self.routes = routes or {}
        self.error = error
        self.errors = {}
        self.calls = []
        self.gates = {}

    def hold(self, destination: Coordinate) -> asyncio.Event:
        self.gates[destination] = asyncio.Event()
        return self.gates[destination]

    async def route(self, origin: Coordinate, destination: Coordinate) -> Route:
        self.calls.append((origin, destination))
        if destination in self.gates:
            await self.gates[destination].wait()
        error = self.errors.get(destination, self.error)
        if error is not None:
            raise error
        return self.routes.get(destination) or make_route(destination)


@pytest.fixture
def trip_config():
    return TripConfig(origin=ORIGIN, price_per_km=0.636, origin_label="Annecy")


@pytest.fixture
def resolver():
    return FakeResolver({"Lyon": LYON, "Grenoble": GRENOBLE})


@pytest.fixture
def route_provider():
    return FakeRouteProvider()


@pytest.fixture
def pipeline(resolver, route_provider, trip_config):
    return TripEstimationPipeline(resolver, route_provider, trip_config)
