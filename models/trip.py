"""Data models for trips, routes and pipeline states."""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, List, Tuple, Union

from shapely.geometry import LineString


@dataclass(frozen=True)
class Coordinate:
    """A point in (latitude, longitude) order."""
    latitude: float
    longitude: float

    def __post_init__(self):
        if not -90 <= self.latitude <= 90:
            raise ValueError(f"Latitude must be between -90 and 90, got {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise ValueError(f"Longitude must be between -180 and 180, got {self.longitude}")

    def as_lat_lon(self) -> List[float]:
        return [self.latitude, self.longitude]

    def to_dict(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class Route:
    path_points: Tuple[Coordinate, ...]
    distance_meters: float
    duration_seconds: float

    def __post_init__(self):
        if not (math.isfinite(self.distance_meters) and math.isfinite(self.duration_seconds)):
            raise ValueError(f"Route totals must be finite, got {self.distance_meters}, {self.duration_seconds}")
        if self.distance_meters < 0:
            raise ValueError(f"distance_meters must be non-negative, got {self.distance_meters}")
        if self.duration_seconds < 0:
            raise ValueError(f"duration_seconds must be non-negative, got {self.duration_seconds}")

    @property
    def distance_km(self) -> float:
        return self.distance_meters / 1000

    @property
    def duration_minutes(self) -> int:
        return round(self.duration_seconds / 60)

    def lat_lon_path(self) -> List[List[float]]:
        return [point.as_lat_lon() for point in self.path_points]

    def bounds(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """Return ((south, west), (north, east)) of the path."""
        points = [(p.longitude, p.latitude) for p in self.path_points]
        if len(points) == 1:
            points = points * 2
        min_lon, min_lat, max_lon, max_lat = LineString(points).bounds
        return (min_lat, min_lon), (max_lat, max_lon)


class SeverityTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class TripEstimate:
    """Round-trip price breakdown; amounts keep full float precision."""
    distance_km: float
    duration_minutes: int
    toll_input: float
    km_cost: float
    one_way_total: float
    round_trip_total: float
    tier: SeverityTier

    def to_dict(self) -> Dict:
        return {
            "distance_km": self.distance_km,
            "duration_minutes": self.duration_minutes,
            "toll_input": self.toll_input,
            "km_cost": self.km_cost,
            "one_way_total": self.one_way_total,
            "round_trip_total": self.round_trip_total,
            "tier": self.tier.value,
        }


@dataclass(frozen=True)
class Idle:
    status: ClassVar[str] = "idle"


@dataclass(frozen=True)
class Loading:
    query: str
    generation: int
    status: ClassVar[str] = "loading"


@dataclass(frozen=True)
class Error:
    message: str
    kind: str
    query: str = ""
    status: ClassVar[str] = "error"


@dataclass(frozen=True)
class Ready:
    query: str
    origin: Coordinate
    destination: Coordinate
    route: Route = field(repr=False)
    estimate: TripEstimate
    status: ClassVar[str] = "ready"


PipelineState = Union[Idle, Loading, Error, Ready]
