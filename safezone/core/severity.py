"""
Severity ranking functions for safezone.

This module contains pure functions for ordering alert severity
labels and reducing a set of alerts to one dominant severity.
"""

from typing import Any, Iterable, Optional, Sequence
from .models import Alert, SeverityLevel

# 심각도 순서 정의 (낮음 -> 높음)
SEVERITY_ORDER = {
    SeverityLevel.SAFE: 0,
    SeverityLevel.MINOR: 1,
    SeverityLevel.MODERATE: 2,
    SeverityLevel.SEVERE: 3,
    SeverityLevel.EXTREME: 4,
}

# 탈출 안내 대상 심각도
ESCAPE_LEVELS = frozenset({SeverityLevel.SEVERE, SeverityLevel.EXTREME})

_ALERT_LEVELS = {
    level.value: level
    for level in SeverityLevel
    if level is not SeverityLevel.SAFE
}

def parse_severity(raw: Any) -> SeverityLevel:
    """
    원시 심각도 라벨을 SeverityLevel로 변환합니다.

    대소문자를 구분하지 않으며, 알 수 없는 라벨은 가장 낮은
    경보 등급(minor)으로 취급합니다.

    Args:
        raw: 백엔드가 보낸 심각도 값

    Returns:
        변환된 심각도
    """
    if isinstance(raw, SeverityLevel):
        return raw
    return _ALERT_LEVELS.get(str(raw).strip().lower(), SeverityLevel.MINOR)

def severity_rank(level: SeverityLevel) -> int:
    return SEVERITY_ORDER[level]

def dominant_alert(alerts: Sequence[Alert]) -> Optional[Alert]:
    """
    가장 높은 심각도의 경보를 반환합니다.

    동률이면 입력 순서상 먼저 나온 경보가 선택됩니다.
    """
    best: Optional[Alert] = None
    for alert in alerts:
        if best is None or SEVERITY_ORDER[alert.severity] > SEVERITY_ORDER[best.severity]:
            best = alert
    return best

def rank(alerts: Iterable[Alert]) -> SeverityLevel:
    """
    경보 목록의 지배 심각도를 계산합니다.

    Args:
        alerts: 경보 목록

    Returns:
        최대 심각도, 목록이 비어 있으면 safe
    """
    top = dominant_alert(list(alerts))
    return top.severity if top is not None else SeverityLevel.SAFE

def requires_escape(level: SeverityLevel) -> bool:
    return level in ESCAPE_LEVELS
