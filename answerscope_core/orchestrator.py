"""
Extraction Orchestrator

One query, one attempt:

    open isolated page -> navigate -> dismiss consent -> await stability
    -> resolve locator -> read container -> sanitize -> verdict

Only this module decides success or failure. Lower layers report absence
with None / empty lists, and every exit path releases the browsing context.
"""

import asyncio
import logging
from dataclasses import replace
from typing import List, Optional, Sequence
from urllib.parse import quote_plus

from .browser_setup import SharedBrowser, open_page
from .config import SearchOptions
from .error_handler import (
    INSUFFICIENT_CONTENT_MESSAGE,
    NO_CONTAINER_MESSAGE,
    TIMEOUT_MESSAGE,
    failed_result,
)
from .locators import BEST_KNOWN_REGION
from .models import ErrorKind, ExtractionResult
from .page_utils import accept_cookies, read_container
from .retry import extract_with_retry
from .sanitizer import sanitize_with_floor
from .selector_resolver import SelectorResolver
from .sources import parse_sources
from .stability import StabilityMonitor

logger = logging.getLogger(__name__)


class NavigationFailed(Exception):
    """Raised inside the pipeline when the search page cannot be reached"""


def build_search_url(query: str, template: str) -> str:
    return template.format(query=quote_plus(query))


class AnswerExtractor:

    def __init__(
        self,
        browser: SharedBrowser,
        options: Optional[SearchOptions] = None,
        resolver: Optional[SelectorResolver] = None,
        monitor: Optional[StabilityMonitor] = None,
    ):
        self.browser = browser
        self.options = options or browser.options
        self.thresholds = self.options.thresholds
        self.resolver = resolver or SelectorResolver(self.thresholds)
        self.monitor = monitor or StabilityMonitor(substance_floor=self.thresholds.substance_floor)

    async def extract(self, query: str) -> ExtractionResult:
        timeout_ms = self.options.timeout_ms
        try:
            return await asyncio.wait_for(self._run(query), timeout=timeout_ms / 1000)
        except asyncio.TimeoutError:
            logger.warning(f"Extraction for {query!r} timed out after {timeout_ms} ms")
            return ExtractionResult.failed(query, TIMEOUT_MESSAGE.format(timeout_ms=timeout_ms), ErrorKind.TIMEOUT)
        except NavigationFailed as e:
            return failed_result(query, e.__cause__ or e, ErrorKind.NAVIGATION, "navigation")
        except Exception as e:
            return failed_result(query, e, ErrorKind.BROWSER, "browser", exc_info=True)

    async def _run(self, query: str) -> ExtractionResult:
        options = self.options
        async with open_page(self.browser, options) as page:
            url = build_search_url(query, options.search_url)
            logger.info(f"Searching {query!r}")
            try:
                await page.goto(url, wait_until="domcontentloaded", timeout=options.navigation_timeout_ms)
            except Exception as e:
                raise NavigationFailed(str(e)) from e

            if await accept_cookies(page):
                logger.debug("Consent prompt dismissed")

            await self.monitor.await_stable(
                page,
                BEST_KNOWN_REGION.selector,
                options.quiet_period_ms,
                options.poll_interval_ms,
                options.stability_deadline_ms,
            )

            locator = await self.resolver.resolve(page, query)
            if locator is None:
                return ExtractionResult.failed(query, NO_CONTAINER_MESSAGE, ErrorKind.NO_CONTAINER)

            container = await read_container(page, locator.selector) or {}
            raw = container.get("text") or ""
            floor = self.thresholds.substance_floor
            text = sanitize_with_floor(raw, floor)
            if len(text) < floor:
                return ExtractionResult.failed(
                    query,
                    INSUFFICIENT_CONTENT_MESSAGE.format(length=len(text), floor=floor),
                    ErrorKind.INSUFFICIENT_CONTENT,
                )

            sources = parse_sources(container.get("links") or [], options.search_url)
            logger.info(f"Extracted {len(text)} chars for {query!r} via {locator.selector}")
            return ExtractionResult.succeeded(query, text, sources)


async def extract_many(
    queries: Sequence[str],
    options: Optional[SearchOptions] = None,
    browser: Optional[SharedBrowser] = None,
) -> List[ExtractionResult]:
    """
    Run one independent extraction per query, concurrently.

    Results come back in input order. Slot i starts i * delay_ms after the
    first one.
    """
    if not queries:
        return []
    options = options or SearchOptions.from_config()
    shared = browser or SharedBrowser(options)

    async def run_slot(index: int, query: str) -> ExtractionResult:
        if options.delay_ms and index:
            await asyncio.sleep(index * options.delay_ms / 1000)
        extractor = AnswerExtractor(shared, options)
        return await extract_with_retry(extractor.extract, query, max_attempts=options.retries)

    # The batch keeps its own reference so staggered slots reuse one process.
    try:
        await shared.acquire()
    except Exception as e:
        failure = failed_result(queries[0], e, ErrorKind.BROWSER, "browser", exc_info=True)
        return [replace(failure, query=q) for q in queries]
    try:
        return list(await asyncio.gather(*(run_slot(i, q) for i, q in enumerate(queries))))
    finally:
        await shared.release()
