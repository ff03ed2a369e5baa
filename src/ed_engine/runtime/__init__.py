"""Telemetry and configuration shared by every interpreter layer."""

from . import telemetry
from .config import InterpreterConfig

__all__ = ["InterpreterConfig", "telemetry"]
