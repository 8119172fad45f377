"""Error taxonomy for destination resolution, routing and toll input."""


class EstimationError(Exception):
    """Base class; ``user_message`` is what the user sees."""
    user_message = "The estimate could not be calculated"

    def __init__(self, message: str = None):
        super().__init__(message or self.user_message)


class EmptyQueryError(EstimationError):
    user_message = "Please enter a destination"


class NotFoundError(EstimationError):
    user_message = "Destination not found"


class RouteUnavailableError(EstimationError):
    user_message = "Unable to calculate the route"


class ServiceError(EstimationError):
    """Transport failure, timeout or malformed response from an external service."""
    user_message = "The mapping service is unavailable, please try again"


class InvalidTollError(EstimationError):
    user_message = "Toll amount cannot be negative"
