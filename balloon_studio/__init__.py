"""Balloon design, inventory and supplier ordering service."""

__version__ = "0.1.0"
