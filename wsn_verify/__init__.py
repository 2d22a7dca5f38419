"""Latency verification for time-triggered wireless sensor network schedules."""

__version__ = "0.1.0"
