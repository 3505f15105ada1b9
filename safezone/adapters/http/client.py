"""
JSON HTTP client base for safezone adapters.

This module provides the shared aiohttp session handling, timeout and
retry behaviour used by the geocoding and hazard-query adapters.
"""

import asyncio
import time
from typing import Any, Dict, Optional
import aiohttp
from safezone.common.retry import retry_with_backoff
from safezone.observability import metrics
from safezone.observability.logging_setup import get_logger

log = get_logger("safezone.http")

# 재시도 대상: 전송 계층 오류만 (HTTP 상태 오류는 즉시 실패)
RETRYABLE_ERRORS = (aiohttp.ClientConnectionError, aiohttp.ServerTimeoutError, asyncio.TimeoutError)

class JsonHttpClient:
    """JSON API용 비동기 HTTP 클라이언트"""

    service_name = "http"

    def __init__(self,
                 base_url: str,
                 *,
                 timeout: float = 10.0,
                 max_retries: int = 1,
                 backoff_initial: float = 0.5,
                 headers: Optional[Dict[str, str]] = None):
        """
        초기화합니다.

        Args:
            base_url: API 기본 URL
            timeout: 요청 타임아웃 (초)
            max_retries: 최대 재시도 횟수
            backoff_initial: 재시도 기본 지연 (초)
            headers: 기본 요청 헤더
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_initial = backoff_initial
        self.headers = {"Accept": "application/json", **(headers or {})}
        self.session: Optional[aiohttp.ClientSession] = None

        log.info(f"{self.service_name} 클라이언트 초기화됨 base_url:{self.base_url}")

    async def __aenter__(self):
        """비동기 컨텍스트 매니저 진입"""
        self.session = aiohttp.ClientSession(
            headers=self.headers,
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """비동기 컨텍스트 매니저 종료"""
        if self.session:
            await self.session.close()
            self.session = None

    async def _make_request(self, method: str, endpoint: str, **kwargs) -> Any:
        """
        API 요청을 수행하고 JSON 본문을 반환합니다.

        Args:
            method: HTTP 메서드
            endpoint: API 엔드포인트
            **kwargs: 추가 요청 매개변수 (params 등)

        Returns:
            디코딩된 JSON

        Raises:
            aiohttp.ClientError: 전송 오류 또는 비정상 상태 코드
            ValueError: JSON 디코딩 실패
        """
        if not self.session:
            raise RuntimeError("세션이 초기화되지 않았습니다. async with를 사용하세요.")

        url = f"{self.base_url}{endpoint}"

        async def _request():
            async with self.session.request(method, url, **kwargs) as response:
                response.raise_for_status()
                return await response.json(content_type=None)

        t0 = time.perf_counter()
        try:
            return await retry_with_backoff(
                _request,
                max_retries=self.max_retries,
                base_delay=self.backoff_initial,
                retry_on=RETRYABLE_ERRORS,
            )
        except Exception:
            metrics.external_call_errors.labels(service=self.service_name).inc()
            raise
        finally:
            metrics.external_call_seconds.labels(service=self.service_name).observe(
                time.perf_counter() - t0
            )
