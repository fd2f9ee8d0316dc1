"""Adapters – concrete fetch functions for external list endpoints."""
