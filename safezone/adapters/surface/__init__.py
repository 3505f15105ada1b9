from .state_surface import MapStateSurface, Marker

__all__ = ["MapStateSurface", "Marker"]
