"""
Orchestrators for safezone.

This module contains the refresh coordinator and the session that
owns it together with the presentation state.
"""
from .refresh_coordinator import RefreshCoordinator, RefreshPhase
from .session import SafetySession

__all__ = ["RefreshCoordinator", "RefreshPhase", "SafetySession"]
