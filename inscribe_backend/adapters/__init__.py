"""Adapters for external programs."""
