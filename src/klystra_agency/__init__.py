"""Klystra agency website backend."""

__version__ = "0.1.0"
