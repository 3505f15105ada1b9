"""
In-memory map surface for safezone.

This module keeps the rendered map/UI state (markers, viewport, alert
panel, escape action, status line) so the host UI can poll a snapshot
of it. The presentation synchronizer writes to it; nothing in the core
reads it back.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
from safezone.core.models import Coordinate
from safezone.presentation.models import AlertPanel, Bounds, MarkerColor
from safezone.presentation.view import LEGEND

@dataclass(frozen=True)
class Marker:
    coordinate: Coordinate
    color: MarkerColor
    popup: str

class MapStateSurface:
    """지도/UI 상태를 메모리에 유지하는 표면"""

    def __init__(self, center: Coordinate, zoom: int = 10):
        """
        초기화합니다.

        Args:
            center: 첫 평가 전 기본 지도 중심
            zoom: 기본 줌 레벨
        """
        self.center = center
        self.zoom = zoom
        self.markers: Dict[int, Marker] = {}
        self.bounds: Optional[Bounds] = None
        self.padding_px: int = 0
        self.panel: Optional[AlertPanel] = None
        self.status: Optional[str] = None
        self.escape_label: Optional[str] = None
        self._escape_handler: Optional[Callable[[], str]] = None
        self._next_handle = 1

    def place_marker(self, coordinate: Coordinate, color: MarkerColor, popup: str) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self.markers[handle] = Marker(coordinate, color, popup)
        return handle

    def remove_marker(self, handle: int) -> None:
        self.markers.pop(handle, None)

    def fit_bounds(self, bounds: Bounds, padding_px: int) -> None:
        self.bounds = bounds
        self.padding_px = padding_px

    def render_panel(self, panel: AlertPanel) -> None:
        self.panel = panel
        # 새 평가가 반영되면 진행/오류 메시지는 패널로 대체됨
        self.status = None

    def show_escape_action(self, label: str, handler: Callable[[], str]) -> None:
        self.escape_label = label
        self._escape_handler = handler

    def hide_escape_action(self) -> None:
        self.escape_label = None
        self._escape_handler = None

    def show_status(self, message: str) -> None:
        self.status = message

    @property
    def escape_visible(self) -> bool:
        return self._escape_handler is not None

    def click_escape(self) -> Optional[str]:
        """탈출 버튼 클릭을 처리하고 길찾기 URL을 반환합니다."""
        if self._escape_handler is None:
            return None
        return self._escape_handler()

    def snapshot(self) -> Dict[str, Any]:
        """호스트 UI용 현재 상태 스냅샷"""
        return {
            "viewport": {
                "center": self.center.model_dump(),
                "zoom": self.zoom,
                "bounds": self.bounds.model_dump() if self.bounds else None,
                "padding_px": self.padding_px,
            },
            "markers": [
                {
                    "handle": handle,
                    "latitude": m.coordinate.latitude,
                    "longitude": m.coordinate.longitude,
                    "color": m.color.value,
                    "popup": m.popup,
                }
                for handle, m in sorted(self.markers.items())
            ],
            "panel": self.panel.model_dump(mode="json") if self.panel else None,
            "panel_text": self.panel.as_text() if self.panel else None,
            "status": self.status,
            "escape_action": {"visible": self.escape_visible, "label": self.escape_label},
            "legend": [{"color": color.value, "label": label} for color, label in LEGEND],
        }
