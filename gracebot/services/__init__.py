"""Bot services."""
