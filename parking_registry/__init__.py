"""Parking lot vehicle registry — REST API, record store and CLI client."""

__version__ = "1.0.0"
