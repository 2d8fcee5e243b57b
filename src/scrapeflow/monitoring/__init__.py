"""Monitoring module - Logging."""
