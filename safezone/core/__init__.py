"""
Core domain models and pure functions for safezone.

This module contains the domain models and pure business logic
(severity ranking, safety assessment) that are independent of
external I/O and infrastructure concerns.
"""

from .models import (
    Alert, Coordinate, LocationLabel, OutcomeKind, RefreshOrigin, RefreshOutcome,
    RefreshRequest, SafeCity, SafetyAssessment, SeverityLevel,
)
from .severity import dominant_alert, parse_severity, rank
from .assessment import assess

__all__ = [
    "Alert", "Coordinate", "LocationLabel", "OutcomeKind", "RefreshOrigin", "RefreshOutcome",
    "RefreshRequest", "SafeCity", "SafetyAssessment", "SeverityLevel",
    "dominant_alert", "parse_severity", "rank", "assess",
]
