"""Observability – structured logging for list queries."""
