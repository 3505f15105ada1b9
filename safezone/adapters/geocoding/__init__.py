from .nominatim import NominatimGeocoder

__all__ = ["NominatimGeocoder"]
