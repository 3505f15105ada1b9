"""
Device geolocation source for safezone.

The host UI reports position fixes (or denials) here; the refresh
coordinator reads the latest one as a one-shot position request.
"""

from typing import Optional
from safezone.core.errors import GeolocationError
from safezone.core.models import Coordinate
from safezone.observability.logging_setup import get_logger

log = get_logger("safezone.geolocation")

class DeviceGeolocation:
    """호스트가 보고한 위치를 제공하는 위치 정보 소스"""

    def __init__(self, initial: Optional[Coordinate] = None):
        self._fix: Optional[Coordinate] = initial
        self._denied_reason: Optional[str] = None

    def report(self, coordinate: Coordinate) -> None:
        """새 위치를 기록합니다."""
        self._fix = coordinate
        self._denied_reason = None
        log.debug(f"위치 보고됨 lat:{coordinate.latitude} lon:{coordinate.longitude}")

    def deny(self, reason: str = "permission denied") -> None:
        """위치 접근 거부를 기록합니다."""
        self._fix = None
        self._denied_reason = reason
        log.warning(f"위치 접근 거부됨 reason:{reason}")

    async def current_position(self) -> Coordinate:
        if self._denied_reason is not None:
            raise GeolocationError(self._denied_reason)
        if self._fix is None:
            raise GeolocationError("no position source available", unsupported=True)
        return self._fix
