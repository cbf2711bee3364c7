"""Ranked dashboard of national GDP statistics built from per-country pages."""

__version__ = "0.1.0"
