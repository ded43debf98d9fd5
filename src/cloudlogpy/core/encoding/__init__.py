"""JSON encoding of log records."""
