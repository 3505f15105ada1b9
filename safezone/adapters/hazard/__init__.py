from .client import HazardApiClient

__all__ = ["HazardApiClient"]
