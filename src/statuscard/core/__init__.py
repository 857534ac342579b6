"""Aggregation, customization and gesture dispatch over HA registries and states."""
