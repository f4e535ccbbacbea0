"""
answerscope_core package: extract the AI-generated answer panel from a
search-results page.

Usage:
    from answerscope_core import get_answer, get_answers, SearchOptions

    result = await get_answer("how do tides work")
    if result.success:
        print(result.text)
"""
from .config import Config, SearchOptions, Thresholds, config
from .models import (
    Candidate,
    ErrorKind,
    ExtractionResult,
    Locator,
    LocatorKind,
    Source,
    StabilitySample,
)
from .candidate_scorer import score_candidates
from .stability import StabilityMonitor, StabilityState
from .selector_resolver import SelectorResolver
from .sanitizer import sanitize
from .browser_setup import SharedBrowser
from .orchestrator import AnswerExtractor, extract_many
from .api import get_answer, get_answers

__all__ = [
    # Core
    "Config",
    "config",
    "SearchOptions",
    "Thresholds",
    "AnswerExtractor",
    "SharedBrowser",
    "extract_many",
    "get_answer",
    "get_answers",
    # Engine
    "score_candidates",
    "StabilityMonitor",
    "StabilityState",
    "SelectorResolver",
    "sanitize",
    # Data model
    "Candidate",
    "ErrorKind",
    "ExtractionResult",
    "Locator",
    "LocatorKind",
    "Source",
    "StabilitySample",
]
