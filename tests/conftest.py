"""
테스트 설정 및 픽스처

이 모듈은 pytest 설정과 공통 픽스처를 제공합니다.
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, Mock
from safezone.adapters.geolocation import DeviceGeolocation
from safezone.adapters.routing import GoogleMapsRouteLink
from safezone.adapters.surface import MapStateSurface
from safezone.core.models import Coordinate, LocationLabel
from safezone.orchestrators.session import SafetySession
from safezone.settings import Settings


ORLANDO = Coordinate(latitude=28.5383, longitude=-81.3792)
TAMPA_RAW = {"name": "Tampa", "lat": 27.95, "lon": -82.46, "distance_km": 136.2}


@pytest.fixture
def sample_settings():
    """테스트용 설정"""
    settings = Settings()
    settings.observability.service_name = "test-service"
    settings.observability.build_version = "1.0.0"
    settings.refresh.auto_refresh = False
    settings.refresh.request_timeout_sec = 0.5
    return settings


@pytest.fixture
def orlando():
    return ORLANDO


@pytest.fixture
def orlando_label():
    return LocationLabel(city="Orlando", state="FL")


@pytest.fixture
def severe_response():
    """경보 구역 내부 + Severe 경보 응답"""
    return {
        "location_inside_alert": True,
        "active_alerts": [{"type": "Tornado Warning", "severity": "Severe"}],
        "nearest_safe_cities": [dict(TAMPA_RAW)],
    }


@pytest.fixture
def safe_response():
    """경보 구역 외부 응답"""
    return {
        "location_inside_alert": False,
        "active_alerts": [],
        "nearest_safe_cities": [],
    }


@pytest.fixture
def mock_geocoder(orlando, orlando_label):
    """테스트용 지오코더"""
    geocoder = Mock()
    geocoder.reverse = AsyncMock(return_value=orlando_label)
    geocoder.forward = AsyncMock(return_value=orlando)
    return geocoder


@pytest.fixture
def mock_hazard(safe_response):
    """테스트용 위험 조회 클라이언트"""
    hazard = Mock()
    hazard.check_safety = AsyncMock(return_value=safe_response)
    return hazard


@pytest.fixture
def geolocation(orlando):
    return DeviceGeolocation(orlando)


@pytest.fixture
def surface():
    return MapStateSurface(ORLANDO, 10)


@pytest.fixture
def route_link():
    return GoogleMapsRouteLink()


@pytest.fixture
def session(mock_geocoder, mock_hazard, geolocation, surface, route_link, sample_settings):
    """목업 어댑터로 구성한 세션"""
    return SafetySession(mock_geocoder, mock_hazard, geolocation, surface, route_link, sample_settings)


# pytest 설정
def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line(
        "markers", "asyncio: 비동기 테스트 마커"
    )
    config.addinivalue_line(
        "markers", "integration: 통합 테스트 마커"
    )


def pytest_collection_modifyitems(config, items):
    """테스트 아이템 수정"""
    for item in items:
        # 비동기 테스트에 asyncio 마커 추가
        if asyncio.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)

        if "scenario" in item.name or "integration" in item.name:
            item.add_marker(pytest.mark.integration)
