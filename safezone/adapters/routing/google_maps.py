"""
Google Maps directions link adapter for safezone.

This module assembles a navigable directions URL from two endpoints.
"""

import urllib.parse
from typing import Any, Callable, Optional
from safezone.core.models import Coordinate
from safezone.observability.logging_setup import get_logger

log = get_logger("safezone.routing")

DEFAULT_DIRECTIONS_URL = "https://www.google.com/maps/dir/"

def build_directions_url(origin: Coordinate, destination: Coordinate,
                         travel_mode: str = "driving",
                         base_url: str = DEFAULT_DIRECTIONS_URL) -> str:
    """구글 지도 길찾기 URL을 생성합니다."""
    query = urllib.parse.urlencode({
        "api": 1,
        "origin": f"{origin.latitude},{origin.longitude}",
        "destination": f"{destination.latitude},{destination.longitude}",
        "travelmode": travel_mode,
    }, safe=",")
    return f"{base_url}?{query}"

class GoogleMapsRouteLink:
    """구글 지도 길찾기 링크 서비스"""

    def __init__(self, base_url: str = DEFAULT_DIRECTIONS_URL,
                 opener: Optional[Callable[[str], Any]] = None):
        """
        초기화합니다.

        Args:
            base_url: 길찾기 기본 URL
            opener: URL을 실제로 여는 콜백 (없으면 마지막 URL만 기록)
        """
        self.base_url = base_url
        self.opener = opener
        self.last_url: Optional[str] = None

    def build_url(self, origin: Coordinate, destination: Coordinate, travel_mode: str) -> str:
        return build_directions_url(origin, destination, travel_mode, self.base_url)

    def open(self, url: str) -> None:
        self.last_url = url
        if self.opener is not None:
            self.opener(url)
