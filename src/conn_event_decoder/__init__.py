"""Decoder for packed device connection-event telemetry."""

__version__ = "0.1.0"
