"""Infrastructure Layer — logging setup and other process-level concerns."""
