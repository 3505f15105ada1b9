from .google_maps import GoogleMapsRouteLink, build_directions_url

__all__ = ["GoogleMapsRouteLink", "build_directions_url"]
