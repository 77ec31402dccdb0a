"""Bát Tinh phone number reading service."""

__version__ = "0.1.0"
