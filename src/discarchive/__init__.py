"""Disc Archive Server - optical disc and burned resource catalogue."""

__version__ = "0.1.0"
