"""Trip estimation pipeline: geocode, route, price, and publish the state."""
import dataclasses
from typing import Any, Callable, List, Protocol

from loguru import logger

from configurations.config import TripConfig
from core.errors import EmptyQueryError, EstimationError, InvalidTollError, ServiceError
from models.trip import Coordinate, Error, Idle, Loading, PipelineState, Ready, Route
from routing.cost_calculator import estimate_for_route, parse_toll_input

StateListener = Callable[[PipelineState], None]


class GeoResolver(Protocol):
    async def resolve(self, query: str) -> Coordinate:
        ...


class RouteProvider(Protocol):
    async def route(self, origin: Coordinate, destination: Coordinate) -> Route:
        ...


class TripEstimationPipeline:
    """Owns the pipeline state; only the most recent submission may publish a result.

    Every ``submit`` bumps a generation counter. A run whose generation is no
    longer current when one of its network steps completes is dropped, so
    responses arriving out of order never overwrite a newer request.
    """

    def __init__(self, resolver: GeoResolver, route_provider: RouteProvider, config: TripConfig):
        self._resolver = resolver
        self._route_provider = route_provider
        self._config = config
        self._state: PipelineState = Idle()
        self._generation = 0
        self._toll_input = 0.0
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def origin(self) -> Coordinate:
        return self._config.origin

    @property
    def origin_label(self) -> str:
        return self._config.origin_label

    @property
    def price_per_km(self) -> float:
        return self._config.price_per_km

    @property
    def toll_input(self) -> float:
        return self._toll_input

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def submit(self, query: str) -> PipelineState:
        text = (query or "").strip()
        if not text:
            logger.warning("Rejected empty destination")
            raise EmptyQueryError()

        self._generation += 1
        generation = self._generation
        self._set_state(Loading(query=text, generation=generation))

        try:
            destination = await self._resolver.resolve(text)
            if self._is_stale(generation, "geocoding"):
                return self._state
            route = await self._route_provider.route(self._config.origin, destination)
        except EstimationError as e:
            if self._is_stale(generation, type(e).__name__):
                return self._state
            logger.error(f"Estimate for '{text}' failed: {e}")
            self._set_state(Error(message=e.user_message, kind=type(e).__name__, query=text))
            return self._state
        except Exception as e:
            if self._is_stale(generation, type(e).__name__):
                return self._state
            logger.exception(f"Unexpected failure estimating '{text}': {e}")
            self._set_state(Error(message=ServiceError.user_message, kind=ServiceError.__name__, query=text))
            return self._state

        if self._is_stale(generation, "routing"):
            return self._state

        estimate = estimate_for_route(route, self._toll_input, self._config.price_per_km)
        self._set_state(Ready(
            query=text,
            origin=self._config.origin,
            destination=destination,
            route=route,
            estimate=estimate,
        ))
        logger.success(f"Estimate for '{text}': {estimate.round_trip_total:.2f} EUR round trip "
                       f"({estimate.tier.value})")
        return self._state

    def update_toll_input(self, value: Any) -> PipelineState:
        """Store a new toll amount and reprice the current route, if any."""
        toll = parse_toll_input(value)
        if toll < 0:
            raise InvalidTollError(f"Negative toll: {toll}")

        self._toll_input = toll
        if isinstance(self._state, Ready):
            estimate = estimate_for_route(self._state.route, toll, self._config.price_per_km)
            if estimate != self._state.estimate:
                self._set_state(dataclasses.replace(self._state, estimate=estimate))
        return self._state

    def _is_stale(self, generation: int, step: str) -> bool:
        if generation != self._generation:
            logger.debug(f"Discarding {step} result of superseded request #{generation}")
            return True
        return False

    def _set_state(self, state: PipelineState) -> None:
        self._state = state
        for listener in list(self._listeners):
            listener(state)
