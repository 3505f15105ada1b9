"""
Presentation synchronizer for safezone.

This module applies a SafetyAssessment to the map/UI surface as one
atomic transition. ``apply`` never awaits, so no refresh can interleave
with a half-applied assessment.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from safezone.core.models import SafetyAssessment
from safezone.core.severity import severity_rank
from safezone.observability import metrics
from safezone.observability.logging_setup import get_logger
from safezone.ports.map_surface import MapSurfacePort, MarkerHandle
from safezone.ports.routing import RouteLinkPort
from .models import MarkerColor, RouteRequest
from .view import (
    ESCAPE_LABEL, build_panel, marker_color, safe_city_popup,
    subject_popup, viewport_bounds,
)

log = get_logger("safezone.presentation")

@dataclass
class PresentationState:
    """세션이 소유하는 표시 상태 (마커 핸들, 현재 평가)"""
    subject_marker: Optional[MarkerHandle] = None
    safe_markers: List[MarkerHandle] = field(default_factory=list)
    assessment: Optional[SafetyAssessment] = None
    escape_route: Optional[RouteRequest] = None

class EscapeAction:
    """탈출 버튼 클릭 핸들러 (평가마다 새로 바인딩됨)"""

    def __init__(self, route: RouteRequest, route_link: RouteLinkPort):
        self.route = route
        self.route_link = route_link

    def __call__(self) -> str:
        url = self.route_link.build_url(
            self.route.origin, self.route.destination, self.route.travel_mode
        )
        self.route_link.open(url)
        metrics.escape_actions_opened.inc()
        log.info(f"탈출 경로 열림 destination:{self.route.destination_name} url:{url}")
        return url

class PresentationSynchronizer:
    """평가 결과를 지도/UI 표면에 반영하는 동기화기"""

    def __init__(self,
                 surface: MapSurfacePort,
                 route_link: RouteLinkPort,
                 *,
                 fit_padding_px: int = 50,
                 travel_mode: str = "driving"):
        """
        초기화합니다.

        Args:
            surface: 지도/UI 표면
            route_link: 길찾기 링크 서비스
            fit_padding_px: 뷰포트 맞춤 여백 (픽셀)
            travel_mode: 길찾기 이동 수단
        """
        self.surface = surface
        self.route_link = route_link
        self.fit_padding_px = fit_padding_px
        self.travel_mode = travel_mode
        self.state = PresentationState()

    @property
    def current(self) -> Optional[SafetyAssessment]:
        return self.state.assessment

    def apply(self, assessment: SafetyAssessment) -> None:
        """
        평가 결과 전체를 한 번에 반영합니다.

        새 마커 배치, 뷰포트 맞춤, 패널 갱신, 탈출 버튼 토글, 이전 마커
        제거 순서로 수행하며 중간에 이벤트 루프에 제어를 넘기지 않습니다.
        표면 호출이 실패하면 새로 배치한 마커를 지우고 이전 상태를
        유지한 채 예외를 전파합니다.
        """
        route = None
        if assessment.escape_target is not None:
            route = RouteRequest(
                origin=assessment.subject_coordinate,
                destination=assessment.escape_target.coordinate,
                destination_name=assessment.escape_target.name,
                travel_mode=self.travel_mode,
            )

        placed: List[MarkerHandle] = []
        try:
            placed.append(self.surface.place_marker(
                assessment.subject_coordinate,
                marker_color(assessment.dominant_severity),
                subject_popup(assessment),
            ))
            for city in assessment.safe_cities:
                placed.append(self.surface.place_marker(
                    city.coordinate, MarkerColor.GREEN, safe_city_popup(city)
                ))

            self.surface.fit_bounds(viewport_bounds(assessment), self.fit_padding_px)
            self.surface.render_panel(build_panel(assessment))

            if route is not None:
                self.surface.show_escape_action(ESCAPE_LABEL, EscapeAction(route, self.route_link))
            else:
                self.surface.hide_escape_action()
        except Exception:
            log.error(f"표시 상태 반영 실패, 새 마커 {len(placed)}개 되돌림")
            for handle in placed:
                self.surface.remove_marker(handle)
            raise

        self._clear_markers()
        self.state.subject_marker = placed[0]
        self.state.safe_markers = placed[1:]
        self.state.escape_route = route
        self.state.assessment = assessment
        metrics.current_severity.set(severity_rank(assessment.dominant_severity))

        log.info(f"표시 상태 갱신됨 label:{assessment.location_label} "
                 f"severity:{assessment.dominant_severity.value} "
                 f"markers:{1 + len(self.state.safe_markers)} "
                 f"escape:{self.state.escape_route is not None}")

    def show_status(self, message: str) -> None:
        self.surface.show_status(message)

    def _clear_markers(self) -> None:
        if self.state.subject_marker is not None:
            self.surface.remove_marker(self.state.subject_marker)
            self.state.subject_marker = None
        for handle in self.state.safe_markers:
            self.surface.remove_marker(handle)
        self.state.safe_markers = []
