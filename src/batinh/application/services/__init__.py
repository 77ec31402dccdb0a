"""Application services."""

from batinh.application.services.caller_locks import CallerLocks

__all__ = ["CallerLocks"]
