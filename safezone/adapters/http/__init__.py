from .client import JsonHttpClient

__all__ = ["JsonHttpClient"]
