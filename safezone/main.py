# safezone/main.py
import os, asyncio, signal
import uvicorn
from safezone.settings import Settings
from safezone.observability.health import create_app
from safezone.observability.logging_setup import setup_logging, get_logger
from safezone.orchestrators.session import SafetySession

def _b(name, default=False): return os.getenv(name, str(default)).lower() in ("1","true","yes","on")

def _opt_float(name, default):
    v = os.getenv(name)
    return float(v) if v not in (None, "") else default

def build_settings() -> Settings:
    s = Settings()

    # 외부 서비스
    s.hazard_api.base_url = os.getenv("HAZARD_API_URL", s.hazard_api.base_url)
    s.hazard_api.timeout_sec = float(os.getenv("HAZARD_API_TIMEOUT_SEC", s.hazard_api.timeout_sec))
    s.geocoder.base_url = os.getenv("GEOCODER_URL", s.geocoder.base_url)
    s.geocoder.user_agent = os.getenv("GEOCODER_USER_AGENT", s.geocoder.user_agent)
    s.routing.base_url = os.getenv("ROUTING_URL", s.routing.base_url)
    s.routing.travel_mode = os.getenv("TRAVEL_MODE", s.routing.travel_mode)

    # 갱신
    s.refresh.auto_refresh = _b("AUTO_REFRESH", s.refresh.auto_refresh)
    s.refresh.interval_sec = float(os.getenv("REFRESH_INTERVAL_SEC", s.refresh.interval_sec))
    s.refresh.request_timeout_sec = float(os.getenv("REQUEST_TIMEOUT_SEC", s.refresh.request_timeout_sec))
    s.refresh.max_retries = int(os.getenv("HTTP_MAX_RETRIES", s.refresh.max_retries))

    # 지도
    s.map_view.center_latitude = float(os.getenv("MAP_CENTER_LAT", s.map_view.center_latitude))
    s.map_view.center_longitude = float(os.getenv("MAP_CENTER_LON", s.map_view.center_longitude))
    s.map_view.zoom = int(os.getenv("MAP_ZOOM", s.map_view.zoom))
    s.map_view.fit_padding_px = int(os.getenv("FIT_PADDING_PX", s.map_view.fit_padding_px))

    # 고정 위치 (선택)
    s.geolocation.latitude = _opt_float("HOME_LAT", s.geolocation.latitude)
    s.geolocation.longitude = _opt_float("HOME_LON", s.geolocation.longitude)

    # 관측성
    s.observability.metrics_enabled = _b("METRICS_ENABLED", s.observability.metrics_enabled)
    s.observability.http_port = int(os.getenv("METRICS_PORT", s.observability.http_port))
    s.observability.log_level = os.getenv("LOG_LEVEL", s.observability.log_level)
    s.observability.log_json = _b("LOG_JSON", s.observability.log_json)

    return s

async def start_http(settings: Settings, session: SafetySession) -> asyncio.Task:
    app = create_app(settings, session)
    return asyncio.create_task(uvicorn.Server(
        uvicorn.Config(app, host=settings.observability.http_host,
                       port=settings.observability.http_port, log_level="info")
    ).serve())

async def main():
    s = build_settings()
    setup_logging(s.observability.log_level, json=s.observability.log_json)
    log = get_logger()
    log.info("설정 로드 완료")

    session = SafetySession.from_settings(s)
    await session.start()

    http_task = await start_http(s, session)
    log.info(f"HTTP 서버 시작됨 port:{s.observability.http_port}")

    stop = asyncio.Future()
    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try: loop.add_signal_handler(sig, lambda: (not stop.done()) and stop.set_result(True))
            except NotImplementedError: pass
    except RuntimeError: pass

    try:
        # uvicorn이 신호를 먼저 처리해 종료할 수도 있음
        await asyncio.wait([stop, http_task], return_when=asyncio.FIRST_COMPLETED)
    finally:
        if http_task: http_task.cancel()
        await session.close()

def run() -> None:
    asyncio.run(main())

if __name__ == "__main__":
    run()
