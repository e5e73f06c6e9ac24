"""Per-row enrichment: local time resolution and country names."""
