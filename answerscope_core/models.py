"""
Data model for answer extraction.

Everything here is immutable; an ExtractionResult is the only object that
leaves the package.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class LocatorKind(Enum):
    KNOWN_STABLE = "known_stable"
    INFERRED = "inferred"


@dataclass(frozen=True)
class Locator:
    """CSS selector that re-finds an element in the live DOM"""
    selector: str
    kind: LocatorKind = LocatorKind.INFERRED


@dataclass(frozen=True)
class Candidate:
    locator: Locator
    text_length: int
    confidence_score: int
    reasons: Tuple[str, ...]
    content_preview: str


@dataclass(frozen=True)
class StabilitySample:
    timestamp_ms: float
    normalized_text: str


@dataclass(frozen=True)
class Source:
    title: str
    url: str
    domain: str

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "url": self.url, "domain": self.domain}


class ErrorKind(Enum):
    NAVIGATION = "navigation"
    NO_CONTAINER = "no_container"
    INSUFFICIENT_CONTENT = "insufficient_content"
    TIMEOUT = "timeout"
    BROWSER = "browser"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class ExtractionResult:
    """
    Outcome of one extraction.

    Build it through succeeded() / failed(): text is set iff success,
    error is set iff not success. retryable is cleared for failures that
    another attempt cannot change.
    """
    success: bool
    query: str
    timestamp: str
    text: Optional[str] = None
    sources: Optional[Tuple[Source, ...]] = None
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    retryable: bool = False

    @classmethod
    def succeeded(cls, query: str, text: str, sources: Optional[Tuple[Source, ...]] = None) -> "ExtractionResult":
        if not text:
            raise ValueError("successful result requires text")
        return cls(
            success=True,
            query=query,
            timestamp=_utc_now_iso(),
            text=text,
            sources=tuple(sources) if sources else None,
        )

    @classmethod
    def failed(cls, query: str, error: str, kind: ErrorKind, retryable: bool = True) -> "ExtractionResult":
        if not error:
            raise ValueError("failed result requires an error message")
        return cls(
            success=False,
            query=query,
            timestamp=_utc_now_iso(),
            error=error,
            error_kind=kind,
            retryable=retryable,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "success": self.success,
            "query": self.query,
            "timestamp": self.timestamp,
        }
        if self.success:
            data["aiResponse"] = {
                "text": self.text,
                "sources": [s.to_dict() for s in self.sources] if self.sources else None,
            }
        else:
            data["error"] = self.error
            data["errorKind"] = self.error_kind.value if self.error_kind else None
        return data
