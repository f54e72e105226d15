"""Configuration, API records, HTTP client, task helpers and theme for a video subtitle service."""

__version__ = "0.1.0"