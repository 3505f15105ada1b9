"""
Geolocation port interface.

This module defines the protocol for a one-shot position source.
"""

from typing import Protocol
from safezone.core.models import Coordinate

class GeolocationPort(Protocol):
    """위치 정보 포트 인터페이스"""

    async def current_position(self) -> Coordinate:
        """
        현재 위치를 한 번 조회합니다.

        Raises:
            GeolocationError: 미지원 또는 거부
        """
        ...
