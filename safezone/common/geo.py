"""
Geographic utilities for safezone.

Great-circle distance for filling in missing safe-city distances,
coordinate range checks and the bounding box used to fit the map
viewport around the subject and its safe cities.
"""

import math
from typing import Iterable, Tuple

EARTH_RADIUS_KM = 6371.0

def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    두 지점 간의 대원 거리를 계산합니다 (킬로미터).

    Args:
        lat1: 첫 번째 지점의 위도
        lon1: 첫 번째 지점의 경도
        lat2: 두 번째 지점의 위도
        lon2: 두 번째 지점의 경도
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    half_dphi = math.radians(lat2 - lat1) / 2
    half_dlambda = math.radians(lon2 - lon1) / 2

    h = math.sin(half_dphi) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(half_dlambda) ** 2
    # 부동소수 오차로 1을 넘지 않도록 제한
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, h)))

def calculate_bounding_box(points: Iterable[Tuple[float, float]]) -> Tuple[float, float, float, float]:
    """
    점 집합의 경계 상자를 계산합니다.

    Args:
        points: 점 목록 [(위도, 경도), ...]

    Returns:
        (south, west, north, east)

    Raises:
        ValueError: 점이 하나도 없을 때
    """
    lats, lons = [], []
    for lat, lon in points:
        lats.append(lat)
        lons.append(lon)
    if not lats:
        raise ValueError("경계 상자를 계산할 점이 없습니다")
    return (min(lats), min(lons), max(lats), max(lons))

def validate_coordinates(lat: float, lon: float) -> bool:
    """위도 [-90, 90], 경도 [-180, 180] 범위 확인"""
    return -90 <= lat <= 90 and -180 <= lon <= 180
