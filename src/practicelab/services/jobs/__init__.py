"""Job feed search."""
