"""
Presentation models for safezone.

Value objects passed from the presentation synchronizer to the
map/UI surface.
"""

from enum import Enum
from typing import Tuple
from pydantic import BaseModel, ConfigDict
from safezone.core.models import Coordinate, SeverityLevel

class MarkerColor(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"

class Bounds(BaseModel):
    """뷰포트 경계 (south, west, north, east)"""
    model_config = ConfigDict(frozen=True)

    south: float
    west: float
    north: float
    east: float

class RouteRequest(BaseModel):
    """길찾기 요청 (출발지, 목적지, 이동 수단)"""
    model_config = ConfigDict(frozen=True)

    origin: Coordinate
    destination: Coordinate
    destination_name: str
    travel_mode: str = "driving"

class AlertPanel(BaseModel):
    """경보 목록 패널 모델"""
    model_config = ConfigDict(frozen=True)

    headline: str
    location: str
    severity: SeverityLevel
    in_alert_zone: bool
    alert_lines: Tuple[str, ...] = ()
    no_active_alerts: bool = True
    safe_city_lines: Tuple[str, ...] = ()

    def as_text(self) -> str:
        """사이드바용 평문 텍스트"""
        lines = [self.headline]
        if self.no_active_alerts:
            lines.append("No active alerts")
        else:
            lines.append("Active Alerts:")
            lines.extend(self.alert_lines)
        if self.safe_city_lines:
            lines.append("")
            lines.append("Nearest Safe Cities:")
            lines.extend(self.safe_city_lines)
        return "\n".join(lines)
