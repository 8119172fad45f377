"""Configuration settings for the round-trip cost estimator."""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from models.trip import Coordinate

# Load environment variables
load_dotenv()

class Config:
    # Fixed departure point (Annecy)
    ORIGIN_LAT: float = float(os.getenv("ORIGIN_LAT", "45.8992"))
    ORIGIN_LON: float = float(os.getenv("ORIGIN_LON", "6.1294"))
    ORIGIN_LABEL: str = os.getenv("ORIGIN_LABEL", "Annecy")

    # Billing rate in euros per kilometre
    PRICE_PER_KM: float = float(os.getenv("PRICE_PER_KM", "0.636"))

    # External services
    NOMINATIM_URL: str = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org")
    OSRM_URL: str = os.getenv("OSRM_URL", "https://router.project-osrm.org")
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))
    HTTP_USER_AGENT: str = os.getenv("HTTP_USER_AGENT", "roundtrip-estimator/1.0")

    # Map settings
    MAP_ZOOM_START: int = int(os.getenv("MAP_ZOOM_START", "9"))
    TOLL_RATES_URL: str = os.getenv(
        "TOLL_RATES_URL",
        "https://www.vinci-autoroutes.com/fr/conseils/autoroute-mode-demploi/tarifs-peage-vinci-autoroutes/"
    )

    # API settings
    API_HOST: str = os.getenv("API_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("API_PORT", "8080"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


@dataclass(frozen=True)
class TripConfig:
    """Origin and rate handed to the pipeline at construction."""
    origin: Coordinate
    price_per_km: float
    origin_label: str = "Origin"

    def __post_init__(self):
        if self.price_per_km < 0:
            raise ValueError(f"price_per_km must be non-negative, got {self.price_per_km}")

    @classmethod
    def from_config(cls, config: type = Config) -> "TripConfig":
        return cls(
            origin=Coordinate(latitude=config.ORIGIN_LAT, longitude=config.ORIGIN_LON),
            price_per_km=config.PRICE_PER_KM,
            origin_label=config.ORIGIN_LABEL,
        )
