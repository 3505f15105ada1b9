"""
Map/UI surface port interface.

This module defines the write-only protocol the presentation
synchronizer drives. Calls are synchronous so that one assessment
can be applied without yielding to the event loop.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Callable, Protocol
from safezone.core.models import Coordinate

if TYPE_CHECKING:
    from safezone.presentation.models import AlertPanel, Bounds, MarkerColor

MarkerHandle = int

class MapSurfacePort(Protocol):
    """지도/UI 표면 포트 인터페이스"""

    def place_marker(self, coordinate: Coordinate, color: MarkerColor, popup: str) -> MarkerHandle:
        """마커를 배치하고 핸들을 반환합니다."""
        ...

    def remove_marker(self, handle: MarkerHandle) -> None:
        ...

    def fit_bounds(self, bounds: Bounds, padding_px: int) -> None:
        ...

    def render_panel(self, panel: AlertPanel) -> None:
        """경보 목록 패널을 그립니다."""
        ...

    def show_escape_action(self, label: str, handler: Callable[[], str]) -> None:
        """탈출 버튼을 표시하고 클릭 핸들러를 바인딩합니다."""
        ...

    def hide_escape_action(self) -> None:
        ...

    def show_status(self, message: str) -> None:
        """상태 메시지를 표시합니다 (진행/오류)."""
        ...
