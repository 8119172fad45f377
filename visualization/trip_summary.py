"""Format trip estimates for display; rounding happens only here."""
from typing import Dict

from models.trip import SeverityTier, TripEstimate

TIER_COLORS = {
    SeverityTier.LOW: '#16a34a',
    SeverityTier.MEDIUM: '#ca8a04',
    SeverityTier.HIGH: '#ea580c',
    SeverityTier.CRITICAL: '#dc2626',
}


def format_money(amount: float) -> str:
    return f"{amount:.2f} €"


def format_trip_summary(estimate: TripEstimate, price_per_km: float) -> Dict[str, str]:
    """Return the display fields of an estimate, in display order."""
    return {
        'distance': f"{estimate.distance_km:.1f} km",
        'duration': f"{estimate.duration_minutes} min",
        'km_cost': format_money(estimate.km_cost),
        'km_cost_detail': f"Km ({estimate.distance_km:.1f} x {price_per_km}€)",
        'tolls': format_money(estimate.toll_input),
        'one_way_total': format_money(estimate.one_way_total),
        'multiplier': "x 2",
        'round_trip_total': format_money(estimate.round_trip_total),
        'tier': estimate.tier.value,
    }


def formula_text(price_per_km: float) -> str:
    return f"Formula: (Distance x {price_per_km} + Tolls) x 2"


def render_text_summary(destination: str, estimate: TripEstimate, price_per_km: float) -> str:
    fields = format_trip_summary(estimate, price_per_km)
    lines = [
        f"Destination: {destination}",
        f"Distance (one way): {fields['distance']}",
        f"Estimated duration: {fields['duration']}",
        f"{fields['km_cost_detail']}: {fields['km_cost']}",
        f"Tolls: {fields['tolls']}",
        f"Subtotal (one way): {fields['one_way_total']}",
        f"Round-trip multiplier: {fields['multiplier']}",
        f"Total to bill: {fields['round_trip_total']} [{fields['tier']}]",
        formula_text(price_per_km),
    ]
    return "\n".join(lines)
