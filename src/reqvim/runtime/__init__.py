"""Runtime services (telemetry) shared by every reqvim layer."""

from . import telemetry

__all__ = ["telemetry"]
