"""Route group exports."""

from . import health, stations, trip

__all__ = ["health", "stations", "trip"]
