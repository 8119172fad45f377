"""Round-trip cost formula: (distance x rate + tolls) x 2."""
import math
from typing import Any

from models.trip import Route, SeverityTier, TripEstimate

# Upper bounds (exclusive) of each tier, in euros
TIER_THRESHOLDS = (
    (50.0, SeverityTier.LOW),
    (100.0, SeverityTier.MEDIUM),
    (150.0, SeverityTier.HIGH),
)


def parse_toll_input(value: Any) -> float:
    """Read a toll field; blank or non-numeric input counts as zero.

    Negative values are returned as-is, rejecting them is up to the caller.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        toll = float(value)
    else:
        text = str(value).strip().replace(",", ".")
        if not text:
            return 0.0
        try:
            toll = float(text)
        except ValueError:
            return 0.0
    if not math.isfinite(toll):
        return 0.0
    return toll


def severity_tier(round_trip_total: float) -> SeverityTier:
    for upper_bound, tier in TIER_THRESHOLDS:
        if round_trip_total < upper_bound:
            return tier
    return SeverityTier.CRITICAL


def calculate_estimate(distance_km: float, duration_minutes: int, toll_input: Any,
                       price_per_km: float) -> TripEstimate:
    """Compute the price breakdown; amounts keep full precision.

    The tier follows the total as displayed, rounded to the cent.
    """
    toll = parse_toll_input(toll_input)
    km_cost = distance_km * price_per_km
    one_way_total = km_cost + toll
    round_trip_total = one_way_total * 2

    return TripEstimate(
        distance_km=distance_km,
        duration_minutes=duration_minutes,
        toll_input=toll,
        km_cost=km_cost,
        one_way_total=one_way_total,
        round_trip_total=round_trip_total,
        tier=severity_tier(round(round_trip_total, 2)),
    )


def estimate_for_route(route: Route, toll_input: Any, price_per_km: float) -> TripEstimate:
    return calculate_estimate(route.distance_km, route.duration_minutes, toll_input, price_per_km)
