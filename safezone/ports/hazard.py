"""
Hazard query port interface.

This module defines the protocol for the hazard-data backend.
"""

from typing import Any, Dict, Protocol
from safezone.core.models import Coordinate, LocationLabel

class HazardQueryPort(Protocol):
    """위험 조회 포트 인터페이스"""

    async def check_safety(self, coordinate: Coordinate, label: LocationLabel) -> Dict[str, Any]:
        """
        좌표와 도시/주로 위험 정보를 조회합니다.

        Returns:
            원시 응답 JSON 객체

        Raises:
            HazardQueryError: 비정상 응답, 네트워크 오류, JSON 디코딩 실패
        """
        ...
