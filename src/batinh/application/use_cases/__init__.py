"""Application use cases."""

from batinh.application.use_cases.reading_service import ReadingService
from batinh.application.use_cases.requests import (
    AnalyzePhoneRequest,
    CompareRequest,
    FollowUpRequest,
    GeneralInfoRequest,
    ReadingRequest,
    ReadingResult,
    ReadingStatus,
)

__all__ = [
    "AnalyzePhoneRequest",
    "CompareRequest",
    "FollowUpRequest",
    "GeneralInfoRequest",
    "ReadingRequest",
    "ReadingResult",
    "ReadingService",
    "ReadingStatus",
]
