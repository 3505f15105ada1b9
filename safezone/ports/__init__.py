"""
Port interfaces for safezone hexagonal architecture.

This module defines the port interfaces (Protocols) that define
the contracts between the core domain and external services.
"""

from .geocoding import GeocoderPort
from .geolocation import GeolocationPort
from .hazard import HazardQueryPort
from .map_surface import MapSurfacePort, MarkerHandle
from .routing import RouteLinkPort

__all__ = [
    "GeocoderPort", "GeolocationPort", "HazardQueryPort",
    "MapSurfacePort", "MarkerHandle", "RouteLinkPort",
]
