"""
HTTP endpoints for safezone.

This module implements health, readiness, metrics and info endpoints
plus the bridge the host UI uses to report positions, trigger checks,
poll the rendered map state and fire the escape action.
"""

import time
from typing import Optional
from fastapi import FastAPI, HTTPException
from fastapi.responses import Response, JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from pydantic import BaseModel, Field
from safezone.core.models import Coordinate
from safezone.observability import metrics as safezone_metrics
from safezone.observability.logging_setup import get_logger
from safezone.orchestrators.refresh_coordinator import MISSING_INPUT_MESSAGE
from safezone.orchestrators.session import SafetySession
from safezone.settings import Settings

log = get_logger("safezone.http")

class PositionReport(BaseModel):
    """호스트가 보고하는 위치 (또는 거부)"""
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    denied: bool = False
    reason: str = "permission denied"

class ManualCheck(BaseModel):
    city: str = ""
    state: str = ""

def create_app(settings: Settings, session: SafetySession) -> FastAPI:
    """FastAPI 애플리케이션을 생성합니다."""
    app = FastAPI(
        title=settings.observability.service_name,
        version=settings.observability.build_version,
        description="safezone location safety advisory service"
    )

    start_time = time.time()
    coordinator = session.coordinator

    def _state_payload() -> dict:
        payload = session.surface.snapshot()
        payload["refresh"] = {
            "phase": coordinator.phase.value,
            "last_issued_id": coordinator.last_issued_id,
            "last_applied_id": coordinator.last_applied_id,
        }
        current = session.synchronizer.current
        payload["assessment"] = current.model_dump(mode="json") if current else None
        return payload

    @app.get("/health")
    async def health():
        """헬스 체크 엔드포인트"""
        return JSONResponse({
            "status": "ok",
            "service": settings.observability.service_name,
            "timestamp": time.time()
        })

    @app.get("/ready")
    async def ready():
        """레디니스 체크 엔드포인트"""
        return JSONResponse({
            "status": "ready",
            "service": settings.observability.service_name,
            "has_baseline": coordinator.has_baseline,
            "timestamp": time.time()
        })

    @app.get("/metrics")
    async def metrics():
        """Prometheus 메트릭 엔드포인트"""
        if not settings.observability.metrics_enabled:
            raise HTTPException(status_code=503, detail="Metrics disabled")

        safezone_metrics.uptime_seconds.set(time.time() - start_time)
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/info")
    async def info():
        """서비스 정보 엔드포인트"""
        uptime = time.time() - start_time
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "build_date": settings.observability.build_date,
            "uptime_seconds": int(uptime),
            "metrics_enabled": settings.observability.metrics_enabled,
            "log_level": settings.observability.log_level,
            "refresh_interval_sec": settings.refresh.interval_sec,
            "request_timeout_sec": settings.refresh.request_timeout_sec,
        })

    @app.post("/position")
    async def report_position(report: PositionReport):
        """호스트 UI의 위치 보고를 기록합니다."""
        if report.denied:
            session.geolocation.deny(report.reason)
            return {"ok": True, "denied": True}
        if report.latitude is None or report.longitude is None:
            raise HTTPException(status_code=400, detail="latitude and longitude are required")
        session.geolocation.report(Coordinate(latitude=report.latitude, longitude=report.longitude))
        return {"ok": True, "denied": False}

    @app.post("/check/location")
    async def check_location():
        """현재 위치의 안전 여부를 확인합니다."""
        outcome = await coordinator.check_location()
        return {"outcome": outcome.model_dump(mode="json"), "state": _state_payload()}

    @app.post("/check/manual")
    async def check_manual(body: ManualCheck):
        """입력한 도시/주의 안전 여부를 확인합니다."""
        outcome = await coordinator.check_manual(body.city, body.state)
        if outcome is None:
            raise HTTPException(status_code=400, detail=MISSING_INPUT_MESSAGE)
        return {"outcome": outcome.model_dump(mode="json"), "state": _state_payload()}

    @app.get("/state")
    async def state():
        """현재 지도/패널 상태 스냅샷"""
        return JSONResponse(_state_payload())

    @app.post("/escape")
    async def escape():
        """탈출 버튼을 눌러 길찾기 URL을 받습니다."""
        url = session.surface.click_escape()
        if url is None:
            raise HTTPException(status_code=409, detail="No escape route available")
        return {"url": url}

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return JSONResponse({
            "service": settings.observability.service_name,
            "version": settings.observability.build_version,
            "endpoints": {
                "health": "/health",
                "ready": "/ready",
                "metrics": "/metrics",
                "info": "/info",
                "position": "/position",
                "check_location": "/check/location",
                "check_manual": "/check/manual",
                "state": "/state",
                "escape": "/escape"
            }
        })

    return app
