"""Bulk ownership transfer and sharing for OneDrive items."""

__version__ = "0.1.0"
