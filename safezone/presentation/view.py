"""
Pure view helpers for safezone.

Marker colors, popup texts, panel content and viewport bounds
derived from a SafetyAssessment.
"""

from typing import Tuple
from safezone.common.geo import calculate_bounding_box
from safezone.core.models import SafeCity, SafetyAssessment, SeverityLevel
from .models import AlertPanel, Bounds, MarkerColor

MARKER_COLORS = {
    SeverityLevel.SAFE: MarkerColor.GREEN,
    SeverityLevel.MINOR: MarkerColor.YELLOW,
    SeverityLevel.MODERATE: MarkerColor.YELLOW,
    SeverityLevel.SEVERE: MarkerColor.RED,
    SeverityLevel.EXTREME: MarkerColor.RED,
}

LEGEND: Tuple[Tuple[MarkerColor, str], ...] = (
    (MarkerColor.RED, "Severe/Extreme"),
    (MarkerColor.YELLOW, "Minor/Moderate"),
    (MarkerColor.GREEN, "Safe/No Alert"),
)

ESCAPE_LABEL = "Go to Safe City"

def marker_color(level: SeverityLevel) -> MarkerColor:
    return MARKER_COLORS[level]

def format_distance(distance_km: float) -> str:
    return f"{distance_km:.1f} km"

def subject_popup(assessment: SafetyAssessment) -> str:
    return f"You are here: {assessment.location_label}"

def safe_city_popup(city: SafeCity) -> str:
    return f"Safe City: {city.name} ({format_distance(city.distance_km)})"

def build_panel(assessment: SafetyAssessment) -> AlertPanel:
    """
    평가 결과로 경보 목록 패널을 만듭니다.

    경보 구역 밖이거나 경보가 없으면 "No active alerts" 상태가 됩니다.
    """
    shown_alerts = assessment.alerts if assessment.inside_alert_zone else ()
    headline = ("You are in an alert zone!" if assessment.inside_alert_zone
                else "Your location is safe!")
    return AlertPanel(
        headline=headline,
        location=str(assessment.location_label),
        severity=assessment.dominant_severity,
        in_alert_zone=assessment.inside_alert_zone,
        alert_lines=tuple(f"{a.type} - {a.display_severity}" for a in shown_alerts),
        no_active_alerts=not shown_alerts,
        safe_city_lines=tuple(f"{c.name} - {format_distance(c.distance_km)}"
                              for c in assessment.safe_cities),
    )

def viewport_bounds(assessment: SafetyAssessment) -> Bounds:
    """대상 좌표와 모든 안전 도시를 포함하는 경계를 계산합니다."""
    points = [assessment.subject_coordinate.as_pair()]
    points.extend((c.latitude, c.longitude) for c in assessment.safe_cities)
    south, west, north, east = calculate_bounding_box(points)
    return Bounds(south=south, west=west, north=north, east=east)
