"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass

DEFAULT_OPEN_ELEVATION_URL = "https://api.open-elevation.com/api/v1/lookup"
DEFAULT_MAX_WORKERS = 4


@dataclass(frozen=True, slots=True)
class Settings:
    """Application settings populated from environment variables."""

    provider: str = "gpsvisualizer"
    google_api_key: str | None = None
    open_elevation_url: str = DEFAULT_OPEN_ELEVATION_URL
    threshold_meters: float = 2.0
    max_redirects: int = 5
    request_timeout: float = 15.0
    max_workers: int = DEFAULT_MAX_WORKERS
    initial_location: str | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        """Create settings from environment variables.

        Returns:
            A frozen Settings instance with values from the environment.
        """
        return cls(
            provider=os.getenv("ELEVATION_PROVIDER", "gpsvisualizer"),
            google_api_key=os.getenv("GOOGLE_API_KEY") or None,
            open_elevation_url=os.getenv("OPEN_ELEVATION_URL", DEFAULT_OPEN_ELEVATION_URL),
            threshold_meters=float(os.getenv("ALARM_THRESHOLD_METERS", "2.0")),
            max_redirects=int(os.getenv("MAX_REDIRECTS", "5")),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT_SECONDS", "15")),
            max_workers=int(os.getenv("MAX_WORKERS", str(DEFAULT_MAX_WORKERS))),
            initial_location=os.getenv("INITIAL_LOCATION") or None,
        )
