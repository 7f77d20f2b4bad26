"""Alert types and per-kind alert schedules for glucose monitoring."""

__version__ = "0.1.0"
