"""Diagnostics logging package."""

from lifeplan.diagnostics.recorder import DiagnosticsRecorder

__all__ = ["DiagnosticsRecorder"]
