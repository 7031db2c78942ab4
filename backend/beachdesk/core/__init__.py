"""Core configuration, catalog and error types."""
