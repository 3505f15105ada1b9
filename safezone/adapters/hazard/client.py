"""
Hazard-data backend adapter for safezone.

This module queries the ``/checkSafety`` endpoint for whether a location
is inside an active alert zone and which safe cities are nearest.
"""

import asyncio
from typing import Any, Dict
import aiohttp
from safezone.adapters.http.client import JsonHttpClient
from safezone.core.errors import HazardQueryError
from safezone.core.models import Coordinate, LocationLabel
from safezone.observability.logging_setup import get_logger

log = get_logger("safezone.hazard")

class HazardApiClient(JsonHttpClient):
    """위험 정보 백엔드 클라이언트"""

    service_name = "hazard_api"

    async def check_safety(self, coordinate: Coordinate, label: LocationLabel) -> Dict[str, Any]:
        """
        위험 정보를 조회합니다.

        Args:
            coordinate: 조회 좌표
            label: 조회 도시/주 (쿼리 문자열에서 이스케이프됨)

        Returns:
            원시 응답 JSON 객체

        Raises:
            HazardQueryError: 비정상 응답, 네트워크 오류, JSON 디코딩 실패
        """
        params = {
            "lat": coordinate.latitude,
            "lon": coordinate.longitude,
            "city": label.city or "",
            "state": label.state or "",
        }
        try:
            data = await self._make_request("GET", "/checkSafety", params=params)
        except aiohttp.ClientResponseError as e:
            log.error(f"위험 조회 HTTP 오류 status:{e.status} label:{label}")
            raise HazardQueryError(f"HTTP {e.status}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.error(f"위험 조회 네트워크 오류 label:{label} error:{e!r}")
            raise HazardQueryError(f"network error: {e!r}") from e
        except ValueError as e:
            log.error(f"위험 조회 응답 JSON 디코딩 실패 label:{label} error:{e}")
            raise HazardQueryError("malformed JSON response") from e

        if not isinstance(data, dict):
            log.error(f"위험 조회 응답이 객체가 아님 type:{type(data).__name__}")
            raise HazardQueryError("hazard response is not a JSON object")

        log.debug(f"위험 조회 응답 수신 label:{label} inside:{data.get('location_inside_alert')}")
        return data
