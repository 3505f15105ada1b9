# safezone/settings.py
from __future__ import annotations
from pydantic import BaseModel, Field

class HazardApi(BaseModel):
    base_url: str = "https://nationalweatherapi.onrender.com"
    timeout_sec: float = 6.0          # 시도당 타임아웃

class Geocoder(BaseModel):
    base_url: str = "https://nominatim.openstreetmap.org"
    user_agent: str = "safezone/0.1 (location safety advisory)"
    timeout_sec: float = 6.0

class Routing(BaseModel):
    base_url: str = "https://www.google.com/maps/dir/"
    travel_mode: str = "driving"

class Refresh(BaseModel):
    auto_refresh: bool = True
    interval_sec: float = 60.0
    request_timeout_sec: float = 15.0          # 외부 호출당 상한
    max_retries: int = 1
    backoff_initial_sec: float = 0.5

class MapView(BaseModel):
    center_latitude: float = 28.5383           # Orlando
    center_longitude: float = -81.3792
    zoom: int = 10
    fit_padding_px: int = 50

class Geolocation(BaseModel):
    # 호스트가 위치를 보고하기 전 사용할 고정 좌표 (선택)
    latitude: float | None = None
    longitude: float | None = None

class Observability(BaseModel):
    http_host: str = "0.0.0.0"
    http_port: int = 8099
    metrics_enabled: bool = True
    service_name: str = "safezone"
    build_version: str = "0.1.0"
    build_date: str = "2026-10-18"
    log_level: str = "INFO"
    log_json: bool = False

class Settings(BaseModel):
    hazard_api: HazardApi = Field(default_factory=HazardApi)
    geocoder: Geocoder = Field(default_factory=Geocoder)
    routing: Routing = Field(default_factory=Routing)
    refresh: Refresh = Field(default_factory=Refresh)
    map_view: MapView = Field(default_factory=MapView)
    geolocation: Geolocation = Field(default_factory=Geolocation)
    observability: Observability = Field(default_factory=Observability)

    def per_call_timeout(self, timeout_sec: float) -> float:
        """
        재시도와 백오프를 포함한 전체 시도가 갱신 타임아웃 안에 끝나도록
        시도당 HTTP 타임아웃을 제한합니다.
        """
        attempts = self.refresh.max_retries + 1
        # 지터 없는 최대 백오프 합계
        backoff = sum(self.refresh.backoff_initial_sec * 2 ** i for i in range(self.refresh.max_retries))
        budget = (self.refresh.request_timeout_sec - backoff) / attempts
        return max(0.1, min(timeout_sec, budget))
