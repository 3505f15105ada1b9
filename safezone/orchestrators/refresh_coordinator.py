"""
Refresh coordinator for safezone.

This module sequences assessment requests from three origins (manual
input, one-shot geolocation, periodic timer). Every request is stamped
with a strictly increasing id; a request whose id is no longer the
highest issued when it completes is superseded and never applied.
"""

import asyncio
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional, Set, Tuple, TypeVar
from safezone.core.assessment import assess
from safezone.core.errors import (
    GENERIC_FAILURE_MESSAGE, GeocodingError, HazardQueryError, SafezoneError,
)
from safezone.core.models import (
    Coordinate, LocationLabel, OutcomeKind, RefreshOrigin, RefreshOutcome, RefreshRequest,
)
from safezone.observability import metrics
from safezone.observability.logging_setup import get_logger, with_context
from safezone.ports.geocoding import GeocoderPort
from safezone.ports.geolocation import GeolocationPort
from safezone.ports.hazard import HazardQueryPort
from safezone.presentation.synchronizer import PresentationSynchronizer

log = get_logger("safezone.refresh")

T = TypeVar("T")

TIMEOUT_MESSAGE = "Request timed out. Please try again."
LOCATING_MESSAGE = "Getting your location..."
MISSING_INPUT_MESSAGE = "Please enter both city and state!"
NO_CITY_STATE_MESSAGE = "Could not determine city/state from your location."

class RefreshPhase(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    QUERYING = "querying"
    APPLYING = "applying"
    SUPERSEDED = "superseded"
    FAILED = "failed"

Resolver = Callable[[], Awaitable[Tuple[Coordinate, LocationLabel]]]

class RefreshCoordinator:
    """갱신 요청 순서 관리자 (가장 최근에 발행된 요청만 반영)"""

    def __init__(self,
                 geocoder: GeocoderPort,
                 hazard: HazardQueryPort,
                 geolocation: GeolocationPort,
                 synchronizer: PresentationSynchronizer,
                 *,
                 request_timeout_sec: float = 15.0,
                 refresh_interval_sec: float = 60.0):
        """
        초기화합니다.

        Args:
            geocoder: 지오코딩 포트
            hazard: 위험 조회 포트
            geolocation: 위치 정보 포트
            synchronizer: 표시 동기화기
            request_timeout_sec: 외부 호출당 타임아웃 (초)
            refresh_interval_sec: 자동 갱신 주기 (초)
        """
        self.geocoder = geocoder
        self.hazard = hazard
        self.geolocation = geolocation
        self.synchronizer = synchronizer
        self.request_timeout = request_timeout_sec
        self.refresh_interval = refresh_interval_sec

        self._last_issued_id = 0
        self._last_applied_id = 0
        # 진행 중인 요청의 단계 (종료되면 제거)
        self.in_flight: Dict[int, RefreshPhase] = {}
        self.last_outcome: Optional[RefreshOutcome] = None

        self._timer_task: Optional[asyncio.Task] = None
        self._tick_tasks: Set[asyncio.Task] = set()

    @property
    def last_issued_id(self) -> int:
        return self._last_issued_id

    @property
    def last_applied_id(self) -> int:
        return self._last_applied_id

    @property
    def has_baseline(self) -> bool:
        """한 번이라도 평가가 반영되었는지 여부"""
        return self.synchronizer.current is not None

    @property
    def phase(self) -> RefreshPhase:
        """가장 최근 발행 요청의 단계"""
        if self._last_issued_id in self.in_flight:
            return self.in_flight[self._last_issued_id]
        if self.last_outcome is not None and self.last_outcome.kind is OutcomeKind.FAILED \
                and self.last_outcome.request.id == self._last_issued_id:
            return RefreshPhase.FAILED
        return RefreshPhase.IDLE

    def is_latest(self, request: RefreshRequest) -> bool:
        return request.id == self._last_issued_id

    # ---- 트리거 ----

    async def check_location(self, origin: RefreshOrigin = RefreshOrigin.GEOLOCATION) -> RefreshOutcome:
        """위치 정보로 현재 위치의 안전 여부를 확인합니다."""
        request = self._issue(origin)
        self._status(request, LOCATING_MESSAGE)
        return await self._run(request, self._resolve_from_geolocation)

    async def check_manual(self, city: str, state: str) -> Optional[RefreshOutcome]:
        """
        수동 입력한 도시/주의 안전 여부를 확인합니다.

        도시나 주가 비어 있으면 요청을 발행하지 않고 None을 반환합니다.
        """
        city = (city or "").strip()
        state = (state or "").strip()
        if not city or not state:
            self.synchronizer.show_status(MISSING_INPUT_MESSAGE)
            log.info("수동 입력 누락, 요청 발행 안 함")
            return None

        request = self._issue(RefreshOrigin.MANUAL)
        self._status(request, f"Checking safety for {city}, {state}...")

        async def resolve() -> Tuple[Coordinate, LocationLabel]:
            coordinate = await self._bounded(self.geocoder.forward(city, state))
            return coordinate, LocationLabel(city=city, state=state)

        return await self._run(request, resolve)

    async def refresh_tick(self) -> Optional[RefreshOutcome]:
        """
        자동 갱신 한 번을 수행합니다.

        기준 위치가 아직 없으면 요청을 발행하지 않습니다.
        """
        if not self.has_baseline:
            log.debug("기준 위치 없음, 자동 갱신 건너뜀")
            return None
        return await self.check_location(RefreshOrigin.TIMER)

    # ---- 자동 갱신 타이머 ----

    def start_auto_refresh(self) -> asyncio.Task:
        """주기적 자동 갱신 태스크를 시작합니다."""
        if self._timer_task is None or self._timer_task.done():
            self._timer_task = asyncio.create_task(self._auto_refresh_loop())
            log.info(f"자동 갱신 시작 interval:{self.refresh_interval}s")
        return self._timer_task

    async def _auto_refresh_loop(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval)
            # 이전 갱신이 끝나지 않아도 다음 갱신을 발행함 (오래된 결과는 폐기됨)
            task = asyncio.create_task(self.refresh_tick())
            self._tick_tasks.add(task)
            task.add_done_callback(self._tick_tasks.discard)

    async def stop(self) -> None:
        """자동 갱신 타이머와 진행 중인 자동 갱신을 취소합니다."""
        tasks = list(self._tick_tasks)
        if self._timer_task is not None:
            tasks.append(self._timer_task)
            self._timer_task = None
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        log.info("자동 갱신 중지됨")

    # ---- 요청 수명 주기 ----

    def _issue(self, origin: RefreshOrigin) -> RefreshRequest:
        self._last_issued_id += 1
        request = RefreshRequest(id=self._last_issued_id, origin=origin)
        self.in_flight[request.id] = RefreshPhase.IDLE
        metrics.refresh_requests.labels(origin=origin.value).inc()
        log.debug(f"갱신 요청 발행 id:{request.id} origin:{origin.value}")
        return request

    async def _bounded(self, awaitable: Awaitable[T]) -> T:
        return await asyncio.wait_for(awaitable, timeout=self.request_timeout)

    async def _resolve_from_geolocation(self) -> Tuple[Coordinate, LocationLabel]:
        coordinate = await self._bounded(self.geolocation.current_position())
        label = await self._bounded(self.geocoder.reverse(coordinate))
        if not label.is_complete:
            raise GeocodingError(
                f"reverse geocode incomplete city:{label.city} state:{label.state}",
                user_message=NO_CITY_STATE_MESSAGE,
            )
        return coordinate, label

    async def _run(self, request: RefreshRequest, resolve: Resolver) -> RefreshOutcome:
        with with_context(request_id=request.id, origin=request.origin.value):
            try:
                self.in_flight[request.id] = RefreshPhase.RESOLVING
                coordinate, label = await resolve()

                self.in_flight[request.id] = RefreshPhase.QUERYING
                raw = await self._bounded(self.hazard.check_safety(coordinate, label))
                with metrics.assess_seconds.time():
                    assessment = assess(raw, coordinate, label)
                metrics.assessments.labels(severity=assessment.dominant_severity.value).inc()

                # 응답 대기 중 더 새로운 요청이 발행되었으면 폐기
                if not self.is_latest(request):
                    return self._finish(RefreshOutcome.superseded(request))

                self.in_flight[request.id] = RefreshPhase.APPLYING
                self.synchronizer.apply(assessment)
                self._last_applied_id = request.id
                return self._finish(RefreshOutcome.applied(request, assessment))

            except Exception as e:
                # 더 새로운 요청이 발행된 뒤의 실패는 오류가 아니라 폐기
                if not self.is_latest(request):
                    log.debug(f"폐기된 요청의 실패 무시 id:{request.id} error:{e!r}")
                    return self._finish(RefreshOutcome.superseded(request))
                return self._fail(request, self._failure_message(request, e))
            finally:
                self.in_flight.pop(request.id, None)

    def _failure_message(self, request: RefreshRequest, error: Exception) -> str:
        """예외를 기록하고 사용자에게 보여줄 메시지를 고릅니다."""
        if isinstance(error, asyncio.TimeoutError):
            log.warning(f"외부 호출 타임아웃 id:{request.id} timeout:{self.request_timeout}s")
            return TIMEOUT_MESSAGE
        if isinstance(error, HazardQueryError):
            log.error(f"위험 조회 실패 id:{request.id} error:{error}")
            return error.user_message
        if isinstance(error, SafezoneError):
            log.warning(f"입력 확인 실패 id:{request.id} error:{error}")
            return error.user_message
        log.opt(exception=error).error(f"갱신 처리 오류 id:{request.id} error:{error!r}")
        return GENERIC_FAILURE_MESSAGE

    def _fail(self, request: RefreshRequest, message: str) -> RefreshOutcome:
        # 이전 표시 상태는 그대로 두고 상태 메시지만 표시
        self._status(request, message)
        return self._finish(RefreshOutcome.failed(request, message))

    def _finish(self, outcome: RefreshOutcome) -> RefreshOutcome:
        metrics.refresh_outcomes.labels(outcome=outcome.kind.value).inc()
        if outcome.kind is OutcomeKind.SUPERSEDED:
            log.debug(f"오래된 결과 폐기 id:{outcome.request.id} latest:{self._last_issued_id}")
        else:
            log.info(f"갱신 종료 id:{outcome.request.id} outcome:{outcome.kind.value}")
        if self.is_latest(outcome.request):
            self.last_outcome = outcome
        return outcome

    def _status(self, request: RefreshRequest, message: str) -> None:
        # 더 새로운 요청이 상태 표시줄을 소유함
        if self.is_latest(request):
            self.synchronizer.show_status(message)
