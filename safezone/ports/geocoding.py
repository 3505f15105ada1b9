"""
Geocoding port interface.

This module defines the protocol for reverse and forward geocoding.
"""

from typing import Protocol
from safezone.core.models import Coordinate, LocationLabel

class GeocoderPort(Protocol):
    """지오코딩 포트 인터페이스"""

    async def reverse(self, coordinate: Coordinate) -> LocationLabel:
        """
        좌표를 도시/주 라벨로 변환합니다.

        실패 시 예외 대신 city/state가 None인 라벨을 반환합니다.

        Args:
            coordinate: 변환할 좌표
        """
        ...

    async def forward(self, city: str, state: str) -> Coordinate:
        """
        도시/주를 좌표로 변환합니다 (첫 번째 후보만 사용).

        Args:
            city: 도시
            state: 주

        Raises:
            GeocodingError: 후보가 없을 때
        """
        ...
