"""
Routing link port interface.

This module defines the protocol for the external routing/map-link service.
"""

from typing import Protocol
from safezone.core.models import Coordinate

class RouteLinkPort(Protocol):
    """길찾기 링크 포트 인터페이스"""

    def build_url(self, origin: Coordinate, destination: Coordinate, travel_mode: str) -> str:
        """출발지/목적지/이동 수단으로 길찾기 URL을 만듭니다."""
        ...

    def open(self, url: str) -> None:
        """길찾기 URL을 외부로 전달합니다."""
        ...
