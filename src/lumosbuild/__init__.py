"""Lumos firmware build driver."""

__version__ = "0.1.0"
