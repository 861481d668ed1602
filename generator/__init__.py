"""
Periodic span, metric and log emission.

This module provides:
- TelemetryEmitter, which emits one correlated span + counter increment + log per tick
- run_emission_loop, the stoppable timer loop driving the emitter
"""

from generator.emitter import TelemetryEmitter, TickResult
from generator.loop import run_emission_loop

__all__ = ["TelemetryEmitter", "TickResult", "run_emission_loop"]
