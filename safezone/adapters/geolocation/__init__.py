from .device import DeviceGeolocation

__all__ = ["DeviceGeolocation"]
