"""Per-night sleep aggregation and scoring for SlumberLeague."""

__version__ = "0.1.0"
