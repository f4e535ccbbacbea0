"""
Programmatic surface.

    from answerscope_core import get_answer, get_answers

    result = await get_answer("how do tides work")
    results = await get_answers(["query one", "query two"])
"""

from typing import List, Optional, Sequence

from .browser_setup import SharedBrowser
from .config import SearchOptions
from .models import ExtractionResult
from .orchestrator import AnswerExtractor, extract_many
from .retry import extract_with_retry


async def get_answer(
    query: str,
    options: Optional[SearchOptions] = None,
    browser: Optional[SharedBrowser] = None,
) -> ExtractionResult:
    options = options or SearchOptions.from_config()
    extractor = AnswerExtractor(browser or SharedBrowser(options), options)
    return await extract_with_retry(extractor.extract, query, max_attempts=options.retries)


async def get_answers(
    queries: Sequence[str],
    options: Optional[SearchOptions] = None,
    browser: Optional[SharedBrowser] = None,
) -> List[ExtractionResult]:
    """
    Answers for several queries, in input order.

    Every query runs in its own browsing context on one shared browser
    process; slot i starts i * options.delay_ms after the first.
    """
    return await extract_many(queries, options, browser)
