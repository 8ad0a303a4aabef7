"""Terminal UI for the edit session."""

from .app import TunerApp

__all__ = ["TunerApp"]
