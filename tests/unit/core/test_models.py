"""
Core 모델 단위 테스트
"""

import pytest
from pydantic import ValidationError

from safezone.core.errors import GeocodingError, GeolocationError, HazardQueryError, GENERIC_FAILURE_MESSAGE
from safezone.core.models import (
    Coordinate, LocationLabel, OutcomeKind, RefreshOrigin, RefreshOutcome, RefreshRequest, SafeCity,
)


class TestCoordinate:
    """좌표 모델 테스트"""

    @pytest.mark.parametrize("lat,lon", [(91, 0), (-91, 0), (0, 181), (0, -181)])
    def test_out_of_range_rejected(self, lat, lon):
        with pytest.raises(ValidationError):
            Coordinate(latitude=lat, longitude=lon)

    def test_boundary_values_accepted(self):
        assert Coordinate(latitude=90, longitude=-180).as_pair() == (90, -180)


class TestLocationLabel:
    def test_complete_label(self):
        label = LocationLabel(city="Orlando", state="FL")
        assert label.is_complete
        assert str(label) == "Orlando, FL"

    @pytest.mark.parametrize("city,state", [(None, "FL"), ("Orlando", None), ("", ""), (None, None)])
    def test_incomplete_label(self, city, state):
        assert not LocationLabel(city=city, state=state).is_complete


class TestSafeCity:
    def test_negative_distance_rejected(self):
        with pytest.raises(ValidationError):
            SafeCity(name="x", latitude=0, longitude=0, distance_km=-1)

    def test_coordinate_property(self):
        city = SafeCity(name="Tampa", latitude=27.95, longitude=-82.46, distance_km=136.2)
        assert city.coordinate == Coordinate(latitude=27.95, longitude=-82.46)


class TestRefreshOutcome:
    def test_tagged_constructors(self):
        req = RefreshRequest(id=1, origin=RefreshOrigin.MANUAL)
        assert RefreshOutcome.superseded(req).kind is OutcomeKind.SUPERSEDED
        failed = RefreshOutcome.failed(req, "boom")
        assert failed.kind is OutcomeKind.FAILED
        assert failed.message == "boom"
        assert failed.assessment is None

    def test_request_id_must_be_positive(self):
        with pytest.raises(ValidationError):
            RefreshRequest(id=0, origin=RefreshOrigin.TIMER)


class TestErrors:
    """예외 사용자 메시지 테스트"""

    def test_default_user_messages(self):
        assert GeocodingError().user_message == "Could not find coordinates for this location."
        assert GeolocationError().user_message == "Could not get your location."
        assert GeolocationError(unsupported=True).user_message == "Geolocation not supported."
        assert HazardQueryError("HTTP 500").user_message == GENERIC_FAILURE_MESSAGE

    def test_user_message_override(self):
        err = GeocodingError("detail", user_message="custom")
        assert err.user_message == "custom"
        assert str(err) == "detail"
        # 클래스 기본값은 바뀌지 않음
        assert GeocodingError().user_message != "custom"
