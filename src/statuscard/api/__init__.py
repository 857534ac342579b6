"""HTTP surface of the status card service."""
