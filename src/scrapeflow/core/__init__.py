"""Core module - Settings, configuration models, run service."""
