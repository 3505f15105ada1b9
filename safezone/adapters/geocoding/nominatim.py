"""
Nominatim geocoding adapter for safezone.

This module resolves coordinates to a city/state label (reverse) and a
city/state pair to coordinates (forward) using the OpenStreetMap
Nominatim API.
"""

import asyncio
from typing import Any, Dict, Optional
import aiohttp
from safezone.adapters.http.client import JsonHttpClient
from safezone.core.errors import GENERIC_FAILURE_MESSAGE, GeocodingError
from safezone.core.models import Coordinate, LocationLabel
from safezone.observability.logging_setup import get_logger

log = get_logger("safezone.geocoding")

CITY_KEYS = ("city", "town", "village", "county")
STATE_KEYS = ("state_code", "state")

def _first_present(address: Dict[str, Any], keys) -> Optional[str]:
    for key in keys:
        value = address.get(key)
        if value and str(value).strip():
            return str(value).strip()
    return None

def label_from_address(address: Any) -> LocationLabel:
    """Nominatim address 객체에서 도시/주 라벨을 추출합니다."""
    if not isinstance(address, dict):
        return LocationLabel()
    return LocationLabel(
        city=_first_present(address, CITY_KEYS),
        state=_first_present(address, STATE_KEYS),
    )

class NominatimGeocoder(JsonHttpClient):
    """Nominatim 지오코딩 클라이언트"""

    service_name = "nominatim"

    def __init__(self, base_url: str, *, user_agent: str, **kwargs):
        # Nominatim 사용 정책상 User-Agent 필수
        super().__init__(base_url, headers={"User-Agent": user_agent}, **kwargs)

    async def reverse(self, coordinate: Coordinate) -> LocationLabel:
        """
        좌표를 도시/주 라벨로 변환합니다.

        네트워크 오류나 address 누락 시 빈 라벨을 반환합니다.
        """
        try:
            data = await self._make_request("GET", "/reverse", params={
                "lat": coordinate.latitude,
                "lon": coordinate.longitude,
                "format": "json",
            })
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            log.error(f"역지오코딩 실패 lat:{coordinate.latitude} lon:{coordinate.longitude} error:{e!r}")
            return LocationLabel()

        label = label_from_address(data.get("address") if isinstance(data, dict) else None)
        if not label.is_complete:
            log.warning(f"역지오코딩 결과에 도시/주 없음 lat:{coordinate.latitude} lon:{coordinate.longitude}")
        return label

    async def forward(self, city: str, state: str) -> Coordinate:
        """
        도시/주를 좌표로 변환합니다 (첫 번째 후보만 사용).

        Raises:
            GeocodingError: 후보가 없거나 조회에 실패했을 때
        """
        try:
            data = await self._make_request("GET", "/search", params={
                "city": city,
                "state": state,
                "format": "json",
                "limit": 1,
            })
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            log.error(f"지오코딩 요청 실패 city:{city} state:{state} error:{e!r}")
            raise GeocodingError(f"geocoding request failed: {e!r}",
                                 user_message=GENERIC_FAILURE_MESSAGE) from e

        if not isinstance(data, list) or not data:
            log.warning(f"지오코딩 후보 없음 city:{city} state:{state}")
            raise GeocodingError(f"no candidates for {city}, {state}")

        best = data[0]
        try:
            coordinate = Coordinate(latitude=float(best["lat"]), longitude=float(best["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            log.error(f"지오코딩 후보 좌표 오류 candidate:{best!r}")
            raise GeocodingError(f"invalid candidate for {city}, {state}") from e

        log.info(f"지오코딩 성공 city:{city} state:{state} lat:{coordinate.latitude} lon:{coordinate.longitude}")
        return coordinate
