"""
RefreshCoordinator 단위 테스트

이 모듈은 요청 순서 보장(가장 최근 요청만 반영), 타임아웃,
실패 시 이전 상태 유지, 자동 갱신 동작을 테스트합니다.
"""

import asyncio
import pytest
from unittest.mock import AsyncMock
from prometheus_client import REGISTRY

from safezone.core.errors import GeocodingError, HazardQueryError
from safezone.core.models import (
    Coordinate, LocationLabel, OutcomeKind, RefreshOrigin, SeverityLevel,
)
from safezone.orchestrators.refresh_coordinator import (
    LOCATING_MESSAGE, MISSING_INPUT_MESSAGE, NO_CITY_STATE_MESSAGE, TIMEOUT_MESSAGE,
    RefreshCoordinator, RefreshPhase,
)
from safezone.presentation.synchronizer import PresentationSynchronizer

MIAMI = Coordinate(latitude=25.7617, longitude=-80.1918)


class GatedHazard:
    """도시별 이벤트로 응답 시점을 제어하는 위험 조회 가짜 객체"""

    def __init__(self):
        self.gates = {}
        self.responses = {}

    def add(self, city, response):
        """city 라벨로 들어온 조회는 반환된 이벤트가 set될 때까지 대기"""
        gate = asyncio.Event()
        self.gates[city] = gate
        self.responses[city] = response
        return gate

    async def check_safety(self, coordinate, label):
        await self.gates[label.city].wait()
        response = self.responses[label.city]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def sync(surface, route_link):
    return PresentationSynchronizer(surface, route_link)


@pytest.fixture
def coordinator(mock_geocoder, mock_hazard, geolocation, sync):
    return RefreshCoordinator(
        mock_geocoder, mock_hazard, geolocation, sync,
        request_timeout_sec=0.5, refresh_interval_sec=0.05,
    )


class TestRequestLifecycle:
    """요청 발행 및 반영 테스트"""

    @pytest.mark.asyncio
    async def test_check_location_applies(self, coordinator, surface, mock_hazard,
                                          severe_response, orlando, orlando_label):
        mock_hazard.check_safety.return_value = severe_response

        outcome = await coordinator.check_location()

        assert outcome.kind is OutcomeKind.APPLIED
        assert outcome.request.id == 1
        assert outcome.request.origin is RefreshOrigin.GEOLOCATION
        assert outcome.assessment.dominant_severity is SeverityLevel.SEVERE
        mock_hazard.check_safety.assert_awaited_once_with(orlando, orlando_label)
        assert coordinator.last_applied_id == 1
        assert coordinator.has_baseline
        assert coordinator.phase is RefreshPhase.IDLE
        assert surface.escape_visible

    @pytest.mark.asyncio
    async def test_ids_strictly_increase(self, coordinator):
        first = await coordinator.check_location()
        second = await coordinator.check_manual("Orlando", "FL")
        third = await coordinator.check_location()
        assert [first.request.id, second.request.id, third.request.id] == [1, 2, 3]
        assert coordinator.last_issued_id == 3

    @pytest.mark.asyncio
    async def test_manual_uses_entered_label(self, coordinator, mock_geocoder, mock_hazard, orlando):
        outcome = await coordinator.check_manual("  Orlando ", "FL ")
        mock_geocoder.forward.assert_awaited_once_with("Orlando", "FL")
        mock_hazard.check_safety.assert_awaited_once_with(
            orlando, LocationLabel(city="Orlando", state="FL")
        )
        assert outcome.request.origin is RefreshOrigin.MANUAL

    @pytest.mark.asyncio
    @pytest.mark.parametrize("city,state", [("", "FL"), ("Orlando", ""), ("  ", "  ")])
    async def test_manual_blank_input_issues_nothing(self, coordinator, surface, mock_geocoder,
                                                     city, state):
        outcome = await coordinator.check_manual(city, state)
        assert outcome is None
        assert coordinator.last_issued_id == 0
        assert surface.status == MISSING_INPUT_MESSAGE
        mock_geocoder.forward.assert_not_awaited()


class TestSupersession:
    """오래된 요청 폐기 테스트"""

    @pytest.mark.asyncio
    async def test_older_response_arriving_last_is_discarded(
            self, mock_geocoder, geolocation, sync, surface, severe_response, safe_response):
        hazard = GatedHazard()
        gate_a = hazard.add("Orlando", severe_response)
        gate_b = hazard.add("Tampa", safe_response)
        coordinator = RefreshCoordinator(mock_geocoder, hazard, geolocation, sync,
                                         request_timeout_sec=1.0)

        task_a = asyncio.create_task(coordinator.check_location())
        await asyncio.sleep(0)
        task_b = asyncio.create_task(coordinator.check_manual("Tampa", "FL"))
        await asyncio.sleep(0.01)

        # B가 먼저 완료
        gate_b.set()
        outcome_b = await task_b
        gate_a.set()
        outcome_a = await task_a

        assert outcome_a.request.id == 1
        assert outcome_b.request.id == 2
        assert outcome_b.kind is OutcomeKind.APPLIED
        assert outcome_a.kind is OutcomeKind.SUPERSEDED
        assert outcome_a.assessment is None
        assert coordinator.last_applied_id == 2
        assert sync.current.dominant_severity is SeverityLevel.SAFE
        assert str(sync.current.location_label) == "Tampa, FL"
        assert not surface.escape_visible
        assert coordinator.last_outcome is outcome_b

    @pytest.mark.asyncio
    async def test_newer_request_after_older_completes(
            self, mock_geocoder, geolocation, sync, severe_response, safe_response):
        hazard = GatedHazard()
        gate_a = hazard.add("Orlando", safe_response)
        gate_b = hazard.add("Tampa", severe_response)
        coordinator = RefreshCoordinator(mock_geocoder, hazard, geolocation, sync,
                                         request_timeout_sec=1.0)

        task_a = asyncio.create_task(coordinator.check_manual("Orlando", "FL"))
        await asyncio.sleep(0)
        task_b = asyncio.create_task(coordinator.check_manual("Tampa", "FL"))
        await asyncio.sleep(0.01)

        gate_a.set()
        outcome_a = await task_a
        # A는 B가 발행된 뒤 완료되었으므로 반영되지 않음
        assert outcome_a.kind is OutcomeKind.SUPERSEDED
        assert sync.current is None

        gate_b.set()
        outcome_b = await task_b
        assert outcome_b.kind is OutcomeKind.APPLIED
        assert sync.current.dominant_severity is SeverityLevel.SEVERE

    @pytest.mark.asyncio
    async def test_stale_failure_is_superseded(
            self, mock_geocoder, geolocation, sync, surface, safe_response):
        hazard = GatedHazard()
        gate_a = hazard.add("Orlando", HazardQueryError("HTTP 500"))
        gate_b = hazard.add("Tampa", safe_response)
        coordinator = RefreshCoordinator(mock_geocoder, hazard, geolocation, sync,
                                         request_timeout_sec=1.0)
        failed_before = REGISTRY.get_sample_value(
            "refresh_outcomes_total", {"outcome": "failed"}) or 0.0

        task_a = asyncio.create_task(coordinator.check_location())
        await asyncio.sleep(0)
        task_b = asyncio.create_task(coordinator.check_manual("Tampa", "FL"))
        await asyncio.sleep(0.01)

        gate_b.set()
        await task_b
        gate_a.set()
        outcome_a = await task_a

        assert outcome_a.kind is OutcomeKind.SUPERSEDED
        assert outcome_a.message is None
        assert surface.status is None
        assert coordinator.last_outcome.kind is OutcomeKind.APPLIED
        assert coordinator.phase is RefreshPhase.IDLE
        failed_after = REGISTRY.get_sample_value(
            "refresh_outcomes_total", {"outcome": "failed"}) or 0.0
        assert failed_after == failed_before

    @pytest.mark.asyncio
    async def test_stale_timeout_is_superseded(
            self, mock_geocoder, geolocation, sync, surface, safe_response):
        hazard = GatedHazard()
        hazard.add("Orlando", safe_response)  # 열리지 않음
        gate_b = hazard.add("Tampa", safe_response)
        gate_b.set()
        coordinator = RefreshCoordinator(mock_geocoder, hazard, geolocation, sync,
                                         request_timeout_sec=0.2)

        task_a = asyncio.create_task(coordinator.check_location())
        await asyncio.sleep(0)
        outcome_b = await coordinator.check_manual("Tampa", "FL")
        outcome_a = await task_a

        assert outcome_b.kind is OutcomeKind.APPLIED
        assert outcome_a.kind is OutcomeKind.SUPERSEDED
        assert surface.status is None
        assert coordinator.last_applied_id == 2


class TestFailures:
    """실패 시 이전 상태 유지 테스트"""

    @pytest.mark.asyncio
    async def test_timeout_fails_without_state_change(self, coordinator, sync, surface, mock_hazard):
        await coordinator.check_location()
        before = dict(surface.markers)
        baseline = sync.current

        async def never(*args):
            await asyncio.sleep(10)

        mock_hazard.check_safety.side_effect = never
        outcome = await coordinator.check_location()

        assert outcome.kind is OutcomeKind.FAILED
        assert outcome.message == TIMEOUT_MESSAGE
        assert surface.status == TIMEOUT_MESSAGE
        assert surface.markers == before
        assert sync.current is baseline
        assert coordinator.last_applied_id == 1
        assert coordinator.phase is RefreshPhase.FAILED

    @pytest.mark.asyncio
    async def test_hazard_failure_keeps_prior_markers(self, coordinator, sync, surface,
                                                      mock_hazard, severe_response):
        mock_hazard.check_safety.return_value = severe_response
        await coordinator.check_location()
        before = dict(surface.markers)

        mock_hazard.check_safety.side_effect = HazardQueryError("HTTP 503")
        outcome = await coordinator.check_location()

        assert outcome.kind is OutcomeKind.FAILED
        assert outcome.message == "Could not fetch data. Please try again."
        assert surface.markers == before
        assert surface.escape_visible

    @pytest.mark.asyncio
    async def test_forward_geocode_miss(self, coordinator, mock_geocoder, mock_hazard, surface):
        mock_geocoder.forward.side_effect = GeocodingError("no candidates")
        outcome = await coordinator.check_manual("Nowhere", "ZZ")
        assert outcome.kind is OutcomeKind.FAILED
        assert surface.status == "Could not find coordinates for this location."
        mock_hazard.check_safety.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_incomplete_reverse_label(self, coordinator, mock_geocoder, mock_hazard, surface):
        mock_geocoder.reverse.return_value = LocationLabel(city="Orlando")
        outcome = await coordinator.check_location()
        assert outcome.kind is OutcomeKind.FAILED
        assert outcome.message == NO_CITY_STATE_MESSAGE
        mock_hazard.check_safety.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_geolocation_denied(self, coordinator, geolocation, surface):
        geolocation.deny("user denied")
        outcome = await coordinator.check_location()
        assert outcome.kind is OutcomeKind.FAILED
        assert surface.status == "Could not get your location."

    @pytest.mark.asyncio
    async def test_geolocation_unsupported(self, mock_geocoder, mock_hazard, sync, surface):
        from safezone.adapters.geolocation import DeviceGeolocation
        coordinator = RefreshCoordinator(mock_geocoder, mock_hazard, DeviceGeolocation(), sync)
        outcome = await coordinator.check_location()
        assert outcome.message == "Geolocation not supported."

    @pytest.mark.asyncio
    async def test_unexpected_error_reports_generic_message(self, coordinator, mock_hazard):
        mock_hazard.check_safety.side_effect = KeyError("boom")
        outcome = await coordinator.check_location()
        assert outcome.kind is OutcomeKind.FAILED
        assert outcome.message == "Could not fetch data. Please try again."
        assert coordinator.in_flight == {}

    @pytest.mark.asyncio
    async def test_locating_status_shown_while_pending(self, mock_geocoder, geolocation, sync,
                                                       surface, safe_response):
        hazard = GatedHazard()
        gate = hazard.add("Orlando", safe_response)
        coordinator = RefreshCoordinator(mock_geocoder, hazard, geolocation, sync)

        task = asyncio.create_task(coordinator.check_location())
        await asyncio.sleep(0.01)
        assert surface.status == LOCATING_MESSAGE
        assert coordinator.phase is RefreshPhase.QUERYING

        gate.set()
        await task
        assert surface.status is None


class TestAutoRefresh:
    """자동 갱신 테스트"""

    @pytest.mark.asyncio
    async def test_tick_requires_baseline(self, coordinator, mock_hazard):
        assert await coordinator.refresh_tick() is None
        assert coordinator.last_issued_id == 0
        mock_hazard.check_safety.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_tick_after_baseline(self, coordinator):
        await coordinator.check_manual("Orlando", "FL")
        outcome = await coordinator.refresh_tick()
        assert outcome.kind is OutcomeKind.APPLIED
        assert outcome.request.origin is RefreshOrigin.TIMER

    @pytest.mark.asyncio
    async def test_tick_reruns_geolocation_flow(self, coordinator, mock_geocoder, geolocation):
        await coordinator.check_location()
        geolocation.report(MIAMI)
        mock_geocoder.reverse.return_value = LocationLabel(city="Miami", state="FL")

        outcome = await coordinator.refresh_tick()

        assert outcome.assessment.subject_coordinate == MIAMI
        mock_geocoder.reverse.assert_awaited_with(MIAMI)

    @pytest.mark.asyncio
    async def test_timer_runs_and_stops(self, coordinator, mock_hazard):
        await coordinator.check_location()
        calls = mock_hazard.check_safety.await_count

        task = coordinator.start_auto_refresh()
        assert coordinator.start_auto_refresh() is task
        await asyncio.sleep(0.2)
        await coordinator.stop()

        assert task.cancelled() or task.done()
        assert mock_hazard.check_safety.await_count > calls
        stopped_at = mock_hazard.check_safety.await_count
        await asyncio.sleep(0.1)
        assert mock_hazard.check_safety.await_count == stopped_at

    @pytest.mark.asyncio
    async def test_timer_without_baseline_issues_nothing(self, coordinator):
        coordinator.start_auto_refresh()
        await asyncio.sleep(0.15)
        await coordinator.stop()
        assert coordinator.last_issued_id == 0
