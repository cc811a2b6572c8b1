"""Header normalization for item import rows."""
