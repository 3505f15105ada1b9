"""
Logging setup for safezone.

loguru is the only logging backend. Records carry the emitting area
(``extra[name]``) and, while a refresh is running, the request id and
origin bound by the refresh coordinator.
"""

from __future__ import annotations
import logging
import sys
from loguru import logger

# 갱신 컨텍스트 밖의 레코드에도 포맷 필드가 존재해야 함
_DEFAULT_EXTRA = {"name": "safezone", "request_id": "-", "origin": "-"}

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level:<7}</level> | "
    "<cyan>{extra[name]}</cyan> | "
    "req:<magenta>{extra[request_id]}</magenta>/{extra[origin]} - "
    "<level>{message}</level>"
)

class InterceptHandler(logging.Handler):
    """stdlib logging 레코드를 loguru로 전달"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=6, exception=record.exc_info).bind(name=record.name).log(
            level, record.getMessage()
        )

def _route_stdlib() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    # uvicorn/aiohttp는 자체 핸들러를 달기 때문에 직접 교체
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access", "aiohttp.client", "asyncio"):
        std = logging.getLogger(name)
        std.handlers = [InterceptHandler()]
        std.propagate = False

def setup_logging(log_level: str = "INFO", json: bool = False) -> None:
    """
    loguru 싱크를 구성합니다.

    Args:
        log_level: 최소 로그 레벨
        json: True면 한 줄 JSON (컨테이너 수집용), 아니면 컬러 콘솔
    """
    level = log_level.upper()
    logger.remove()
    logger.configure(extra=dict(_DEFAULT_EXTRA))
    if json:
        logger.add(sys.stdout, serialize=True, level=level, enqueue=False)
    else:
        logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            colorize=True,
            backtrace=True,
            diagnose=False,
            level=level,
        )
    _route_stdlib()

def get_logger(name: str = "safezone", **ctx):
    """영역 이름과 선택적 컨텍스트를 바인딩한 logger"""
    return logger.bind(name=name, **ctx)

def with_context(**ctx):
    """with 블록 동안 모든 로그에 컨텍스트를 추가"""
    return logger.contextualize(**ctx)
