"""API clients for forecast data sources."""

from surfcheck.clients.open_meteo_client import OpenMeteoClient, OpenMeteoError

__all__ = [
    "OpenMeteoClient",
    "OpenMeteoError",
]
