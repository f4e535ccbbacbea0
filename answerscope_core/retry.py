"""
Retry Logic for Extractions

A single extraction makes exactly one attempt. This layer sits outside it
and repeats attempts whose failure looks transient (navigation, timeout,
browser), with exponential backoff.

Usage:
    from answerscope_core.retry import extract_with_retry

    result = await extract_with_retry(extractor.extract, query, max_attempts=3)
"""

import asyncio
import logging
from typing import Awaitable, Callable

from .error_handler import is_retryable_result
from .models import ExtractionResult

logger = logging.getLogger(__name__)


def backoff_delay(
    attempt: int,
    initial_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
) -> float:
    """Delay in seconds after the given (1-based) failed attempt"""
    return min(initial_delay * (exponential_base ** (attempt - 1)), max_delay)


async def extract_with_retry(
    extract: Callable[[str], Awaitable[ExtractionResult]],
    query: str,
    max_attempts: int = 1,
    initial_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
) -> ExtractionResult:
    """
    Call extract(query) until it succeeds, fails for a non-transient
    reason, or max_attempts is used up. Returns the last result.
    """
    max_attempts = max(1, int(max_attempts))
    result = await extract(query)

    for attempt in range(1, max_attempts):
        if not is_retryable_result(result):
            return result

        delay = backoff_delay(attempt, initial_delay, max_delay, exponential_base)
        logger.warning(
            f"Attempt {attempt}/{max_attempts} failed for {query!r}: {result.error}. "
            f"Retrying in {delay:.1f}s..."
        )
        await asyncio.sleep(delay)
        result = await extract(query)

    if not result.success and max_attempts > 1 and is_retryable_result(result):
        logger.error(f"Retry exhausted for {query!r} after {max_attempts} attempts: {result.error}")
    return result
