"""Integrations with third-party libraries."""
