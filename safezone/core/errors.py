"""
Error taxonomy for safezone.

Every failure is per-request and recoverable; the refresh coordinator
surfaces ``user_message`` and logs the exception detail.
"""

from typing import Optional

GENERIC_FAILURE_MESSAGE = "Could not fetch data. Please try again."

class SafezoneError(Exception):
    """safezone 기본 예외"""
    user_message = GENERIC_FAILURE_MESSAGE

    def __init__(self, message: str = "", *, user_message: Optional[str] = None):
        super().__init__(message or self.user_message)
        if user_message is not None:
            self.user_message = user_message

class InputResolutionError(SafezoneError):
    """좌표/위치 라벨을 확정하지 못함 (위험 조회를 시작하지 않음)"""

class GeolocationError(InputResolutionError):
    """위치 정보 획득 실패 (미지원 또는 거부)"""
    user_message = "Could not get your location."

    def __init__(self, message: str = "", *, unsupported: bool = False):
        super().__init__(
            message,
            user_message="Geolocation not supported." if unsupported else None,
        )
        self.unsupported = unsupported

class GeocodingError(InputResolutionError):
    """지오코딩 결과 없음 또는 실패"""
    user_message = "Could not find coordinates for this location."

class HazardQueryError(SafezoneError):
    """위험 조회 실패 (비정상 응답, 네트워크 오류, 잘못된 JSON)"""
