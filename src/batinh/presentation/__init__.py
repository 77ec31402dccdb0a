"""Presentation layer."""

from batinh.presentation.console import ConsoleSession

__all__ = ["ConsoleSession"]
