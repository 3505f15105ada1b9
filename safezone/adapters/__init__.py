"""
Adapters for safezone hexagonal architecture.

This module contains the concrete implementations of port interfaces
that handle external I/O: geocoding, hazard queries, routing links,
geolocation and the map/UI surface.
"""

from .geocoding import NominatimGeocoder
from .geolocation import DeviceGeolocation
from .hazard import HazardApiClient
from .routing import GoogleMapsRouteLink
from .surface import MapStateSurface

__all__ = ["NominatimGeocoder", "DeviceGeolocation", "HazardApiClient", "GoogleMapsRouteLink", "MapStateSurface"]
