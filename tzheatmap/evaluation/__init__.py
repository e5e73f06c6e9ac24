"""Aggregation, ranking and rendering."""
