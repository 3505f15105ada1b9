"""
Core domain models for safezone.

This module defines the core domain models using Pydantic v2
for type safety and validation. Assessment-related models are
frozen so that a new query always produces a new instance.
"""

from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

class SeverityLevel(str, Enum):
    """경보 심각도 (safe = 활성 경보 없음)"""
    SAFE = "safe"
    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"
    EXTREME = "extreme"

class RefreshOrigin(str, Enum):
    """갱신 요청 출처"""
    GEOLOCATION = "geolocation"
    MANUAL = "manual"
    TIMER = "timer"

class Coordinate(BaseModel):
    """위경도 좌표 모델"""
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    def as_pair(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

class LocationLabel(BaseModel):
    """도시/주 라벨 모델"""
    model_config = ConfigDict(frozen=True)

    city: Optional[str] = None
    state: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return bool(self.city) and bool(self.state)

    def __str__(self) -> str:
        return f"{self.city}, {self.state}"

class Alert(BaseModel):
    """활성 경보 모델"""
    model_config = ConfigDict(frozen=True)

    type: str
    severity: SeverityLevel
    # 백엔드가 보낸 원본 라벨 (표시용)
    severity_label: Optional[str] = None

    @property
    def display_severity(self) -> str:
        return self.severity_label or self.severity.value.capitalize()

class SafeCity(BaseModel):
    """안전 도시 모델"""
    model_config = ConfigDict(frozen=True)

    name: str
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    distance_km: float = Field(ge=0)

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)

class SafetyAssessment(BaseModel):
    """단일 위험 조회 결과 모델 (불변)"""
    model_config = ConfigDict(frozen=True)

    subject_coordinate: Coordinate
    location_label: LocationLabel
    inside_alert_zone: bool = False
    dominant_severity: SeverityLevel = SeverityLevel.SAFE
    alerts: Tuple[Alert, ...] = ()
    safe_cities: Tuple[SafeCity, ...] = ()
    escape_target: Optional[SafeCity] = None

class RefreshRequest(BaseModel):
    """갱신 요청 모델"""
    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1)
    origin: RefreshOrigin

class OutcomeKind(str, Enum):
    APPLIED = "applied"
    SUPERSEDED = "superseded"
    FAILED = "failed"

class RefreshOutcome(BaseModel):
    """갱신 요청의 최종 결과 (applied | superseded | failed)"""
    model_config = ConfigDict(frozen=True)

    kind: OutcomeKind
    request: RefreshRequest
    assessment: Optional[SafetyAssessment] = None
    message: Optional[str] = None

    @classmethod
    def applied(cls, request: RefreshRequest, assessment: SafetyAssessment) -> "RefreshOutcome":
        return cls(kind=OutcomeKind.APPLIED, request=request, assessment=assessment)

    @classmethod
    def superseded(cls, request: RefreshRequest) -> "RefreshOutcome":
        return cls(kind=OutcomeKind.SUPERSEDED, request=request)

    @classmethod
    def failed(cls, request: RefreshRequest, message: str) -> "RefreshOutcome":
        return cls(kind=OutcomeKind.FAILED, request=request, message=message)
