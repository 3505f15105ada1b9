"""
Safety assessment engine for safezone.

This module contains pure functions for converting a raw hazard-query
response into an immutable SafetyAssessment. Optional fields the backend
omits fall back to tolerant defaults instead of raising.
"""

import math
from typing import Any, Dict, List, Mapping, Optional
from .errors import HazardQueryError
from .models import Alert, Coordinate, LocationLabel, SafeCity, SafetyAssessment, SeverityLevel
from .severity import parse_severity, rank, requires_escape
from safezone.common.geo import haversine_distance, validate_coordinates
from safezone.observability.logging_setup import get_logger

log = get_logger("safezone.assessment")

UNKNOWN_ALERT_TYPE = "Unknown alert"

def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)

def _as_list(raw: Mapping[str, Any], key: str) -> List[Any]:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        log.warning(f"{key} 필드가 목록이 아님, 빈 목록으로 처리 type:{type(value).__name__}")
        return []
    return value

def _to_float(value: Any) -> Optional[float]:
    try:
        f = float(value)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None

def parse_alerts(raw_alerts: List[Any]) -> List[Alert]:
    """원시 경보 목록을 Alert 목록으로 변환합니다 (입력 순서 유지)."""
    alerts: List[Alert] = []
    for item in raw_alerts:
        if not isinstance(item, dict):
            log.warning(f"경보 항목 형식 오류 건너뜀 item:{item!r}")
            continue
        raw_severity = item.get("severity")
        alerts.append(Alert(
            type=str(item.get("type") or UNKNOWN_ALERT_TYPE),
            severity=parse_severity(raw_severity if raw_severity is not None else ""),
            severity_label=str(raw_severity) if raw_severity is not None else None,
        ))
    return alerts

def parse_safe_cities(raw_cities: List[Any], subject: Coordinate) -> List[SafeCity]:
    """
    원시 안전 도시 목록을 거리 오름차순 SafeCity 목록으로 변환합니다.

    상위 서비스의 정렬을 신뢰하지 않고 로컬에서 다시 정렬합니다.
    distance_km가 없거나 유효하지 않으면 대상 좌표로부터의
    Haversine 거리로 채웁니다.
    """
    cities: List[SafeCity] = []
    for item in raw_cities:
        if not isinstance(item, dict):
            log.warning(f"안전 도시 항목 형식 오류 건너뜀 item:{item!r}")
            continue

        lat = _to_float(item.get("lat"))
        lon = _to_float(item.get("lon"))
        if lat is None or lon is None or not validate_coordinates(lat, lon):
            log.warning(f"안전 도시 좌표 오류 건너뜀 name:{item.get('name')} lat:{item.get('lat')} lon:{item.get('lon')}")
            continue

        distance = _to_float(item.get("distance_km"))
        if distance is None or distance < 0:
            distance = haversine_distance(subject.latitude, subject.longitude, lat, lon)

        cities.append(SafeCity(
            name=str(item.get("name") or f"({lat:.4f}, {lon:.4f})"),
            latitude=lat,
            longitude=lon,
            distance_km=distance,
        ))

    # 거리가 같으면 이름, 좌표 순으로 정렬 (입력 순서와 무관)
    cities.sort(key=lambda c: (c.distance_km, c.name, c.latitude, c.longitude))
    return cities

def assess(query: Dict[str, Any],
           subject_coordinate: Coordinate,
           location_label: LocationLabel) -> SafetyAssessment:
    """
    위험 조회 응답을 SafetyAssessment로 정규화합니다.

    Args:
        query: 위험 조회 응답 (JSON 객체)
        subject_coordinate: 조회 대상 좌표
        location_label: 조회 대상 도시/주

    Returns:
        새 SafetyAssessment 인스턴스

    Raises:
        HazardQueryError: 응답이 JSON 객체가 아닐 때
    """
    if not isinstance(query, Mapping):
        raise HazardQueryError(f"위험 조회 응답 형식 오류: {type(query).__name__}")

    inside = _as_bool(query.get("location_inside_alert", False))
    alerts = parse_alerts(_as_list(query, "active_alerts"))
    cities = parse_safe_cities(_as_list(query, "nearest_safe_cities"), subject_coordinate)

    dominant = rank(alerts) if inside and alerts else SeverityLevel.SAFE
    escape_target = cities[0] if requires_escape(dominant) and cities else None

    log.debug(f"안전 평가 완료 label:{location_label} inside:{inside} "
              f"severity:{dominant.value} alerts:{len(alerts)} cities:{len(cities)} "
              f"escape:{escape_target.name if escape_target else None}")

    return SafetyAssessment(
        subject_coordinate=subject_coordinate,
        location_label=location_label,
        inside_alert_zone=inside,
        dominant_severity=dominant,
        alerts=tuple(alerts),
        safe_cities=tuple(cities),
        escape_target=escape_target,
    )
