"""
Presentation layer for safezone.

This module derives visual state (markers, viewport, alert panel,
escape action) from a SafetyAssessment and applies it to the surface.
"""

from .models import AlertPanel, Bounds, MarkerColor, RouteRequest
from .synchronizer import EscapeAction, PresentationState, PresentationSynchronizer

__all__ = [
    "AlertPanel", "Bounds", "MarkerColor", "RouteRequest",
    "EscapeAction", "PresentationState", "PresentationSynchronizer",
]
