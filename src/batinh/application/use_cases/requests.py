"""Reading requests and results."""

from dataclasses import dataclass, field
from enum import Enum

from batinh.domain.entities import AnalysisResult


@dataclass(frozen=True)
class AnalyzePhoneRequest:
    """Analyze one number, optionally answering a question about it."""

    caller_id: str
    phone_number: str
    question: str = ""


@dataclass(frozen=True)
class FollowUpRequest:
    """Ask about the caller's current number."""

    caller_id: str
    question: str


@dataclass(frozen=True)
class CompareRequest:
    """Compare two or more numbers."""

    caller_id: str
    phone_numbers: list[str]
    question: str = ""


@dataclass(frozen=True)
class GeneralInfoRequest:
    """General question about the Bát Tinh method."""

    caller_id: str
    question: str


ReadingRequest = (
    AnalyzePhoneRequest | FollowUpRequest | CompareRequest | GeneralInfoRequest
)


class ReadingStatus(str, Enum):
    """Outcome of a reading."""

    OK = "ok"
    INVALID_INPUT = "invalid_input"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ReadingResult:
    """Uniform result of every request kind.

    Attributes:
        status: Outcome.
        answer: Text for the caller (a notice when status is not OK).
        handled_by: Request kind that produced the answer.
        analyses: Analyses the answer is based on.
        fallback_hops: Fallbacks taken before the answer was produced.
    """

    status: ReadingStatus
    answer: str
    handled_by: str | None = None
    analyses: list[AnalysisResult] = field(default_factory=list)
    fallback_hops: int = 0

    @property
    def ok(self) -> bool:
        """Whether the reading succeeded."""
        return self.status is ReadingStatus.OK
