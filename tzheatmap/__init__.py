"""Weekday x hour heatmaps of timestamped security events, bucketed in each event's own time zone."""

__version__ = "0.3.0"
