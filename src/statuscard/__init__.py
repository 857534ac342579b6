"""Status card aggregation service for Home Assistant."""

__version__ = "1.0.0"
