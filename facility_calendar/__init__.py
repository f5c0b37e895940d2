"""Facility scheduling calendar: lane layout engine and drag interactions."""

__version__ = "0.1.0"
