"""Logging setup and correlation context."""
