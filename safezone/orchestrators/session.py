"""
Safety session for safezone.

A session owns everything that used to be process-wide UI state: the
map surface, the presentation state (current assessment and marker
handles), the refresh coordinator and its auto-refresh timer.
"""

import contextlib
from typing import Optional
from safezone.adapters.geocoding import NominatimGeocoder
from safezone.adapters.geolocation import DeviceGeolocation
from safezone.adapters.hazard import HazardApiClient
from safezone.adapters.routing import GoogleMapsRouteLink
from safezone.adapters.surface import MapStateSurface
from safezone.core.models import Coordinate
from safezone.observability.logging_setup import get_logger
from safezone.orchestrators.refresh_coordinator import RefreshCoordinator
from safezone.ports.geocoding import GeocoderPort
from safezone.ports.hazard import HazardQueryPort
from safezone.presentation.synchronizer import PresentationSynchronizer
from safezone.settings import Settings

log = get_logger("safezone.session")

class SafetySession:
    """단일 사용자 안전 확인 세션"""

    def __init__(self,
                 geocoder: GeocoderPort,
                 hazard: HazardQueryPort,
                 geolocation: DeviceGeolocation,
                 surface: MapStateSurface,
                 route_link: GoogleMapsRouteLink,
                 settings: Optional[Settings] = None):
        """
        초기화합니다.

        Args:
            geocoder: 지오코딩 어댑터
            hazard: 위험 조회 어댑터
            geolocation: 위치 정보 소스
            surface: 지도/UI 표면
            route_link: 길찾기 링크 서비스
            settings: 애플리케이션 설정 (없으면 기본값)
        """
        self.settings = settings or Settings()
        self.geocoder = geocoder
        self.hazard = hazard
        self.geolocation = geolocation
        self.surface = surface
        self.route_link = route_link
        self.synchronizer = PresentationSynchronizer(
            surface,
            route_link,
            fit_padding_px=self.settings.map_view.fit_padding_px,
            travel_mode=self.settings.routing.travel_mode,
        )
        self.coordinator = RefreshCoordinator(
            geocoder,
            hazard,
            geolocation,
            self.synchronizer,
            request_timeout_sec=self.settings.refresh.request_timeout_sec,
            refresh_interval_sec=self.settings.refresh.interval_sec,
        )
        self._stack = contextlib.AsyncExitStack()

    @classmethod
    def from_settings(cls, settings: Settings) -> "SafetySession":
        """설정으로 실제 어댑터를 구성한 세션을 만듭니다."""
        http_opts = dict(
            max_retries=settings.refresh.max_retries,
            backoff_initial=settings.refresh.backoff_initial_sec,
        )
        geocoder = NominatimGeocoder(
            settings.geocoder.base_url,
            user_agent=settings.geocoder.user_agent,
            timeout=settings.per_call_timeout(settings.geocoder.timeout_sec),
            **http_opts,
        )
        hazard = HazardApiClient(
            settings.hazard_api.base_url,
            timeout=settings.per_call_timeout(settings.hazard_api.timeout_sec),
            **http_opts,
        )
        initial = None
        if settings.geolocation.latitude is not None and settings.geolocation.longitude is not None:
            initial = Coordinate(latitude=settings.geolocation.latitude,
                                 longitude=settings.geolocation.longitude)
        surface = MapStateSurface(
            Coordinate(latitude=settings.map_view.center_latitude,
                       longitude=settings.map_view.center_longitude),
            settings.map_view.zoom,
        )
        return cls(
            geocoder, hazard, DeviceGeolocation(initial), surface,
            GoogleMapsRouteLink(settings.routing.base_url), settings,
        )

    async def start(self) -> None:
        """HTTP 세션을 열고 자동 갱신을 시작합니다."""
        for client in (self.geocoder, self.hazard):
            if hasattr(client, "__aenter__"):
                await self._stack.enter_async_context(client)
        if self.settings.refresh.auto_refresh:
            self.coordinator.start_auto_refresh()
        log.info("안전 확인 세션 시작됨")

    async def close(self) -> None:
        """자동 갱신 타이머를 취소하고 HTTP 세션을 닫습니다."""
        await self.coordinator.stop()
        await self._stack.aclose()
        log.info("안전 확인 세션 종료됨")

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
