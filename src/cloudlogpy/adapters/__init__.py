"""Adapters connecting the handler to logging and web frameworks."""
