"""
Selector Resolver

Find a locator for the answer panel. Strategies are tried in order and the
first one that returns a locator wins:

1. known_stable_strategy - registered platform selectors, re-validated live
2. scored_strategy       - candidate scorer over a fresh DOM snapshot

Every strategy returns None instead of raising, so adding, removing or
reordering strategies does not touch the control flow.
"""

import logging
from typing import Awaitable, Callable, Optional, Sequence

from .candidate_scorer import score_page
from .config import Thresholds
from .locators import KNOWN_STABLE_LOCATORS, matches_listing_fingerprint
from .models import Candidate, Locator
from .page_utils import element_text

logger = logging.getLogger(__name__)

Strategy = Callable[..., Awaitable[Optional[Locator]]]


def refinds_candidate(candidate: Candidate, live_text: str, thresholds: Thresholds) -> bool:
    """Whether the live text read through the locator is the scored element's"""
    live = live_text.strip()
    if live[:thresholds.preview_chars] != candidate.content_preview:
        return False
    # Small drift is tolerated; the region is stable, not frozen.
    return abs(len(live_text) - candidate.text_length) <= candidate.text_length // 10


async def known_stable_strategy(page, query: str, thresholds: Thresholds) -> Optional[Locator]:
    for locator in KNOWN_STABLE_LOCATORS:
        text = await element_text(page, locator.selector)
        if not text:
            continue
        text = text.strip()
        if len(text) <= thresholds.locator_min_chars:
            logger.debug(f"Known locator {locator.selector}: only {len(text)} chars")
            continue
        if matches_listing_fingerprint(text):
            logger.debug(f"Known locator {locator.selector}: looks like a results listing")
            continue
        return locator
    return None


async def scored_strategy(page, query: str, thresholds: Thresholds) -> Optional[Locator]:
    candidates = await score_page(page, query, thresholds)
    for candidate in candidates:
        text = await element_text(page, candidate.locator.selector)
        if text is None:
            logger.debug(f"Inferred locator {candidate.locator.selector} no longer matches")
            continue
        if not refinds_candidate(candidate, text, thresholds):
            logger.debug(f"Inferred locator {candidate.locator.selector} re-finds a different element")
            continue
        if matches_listing_fingerprint(text):
            logger.debug(f"Inferred locator {candidate.locator.selector}: looks like a results listing")
            continue
        logger.info(
            f"Inferred locator {candidate.locator.selector} "
            f"(score {candidate.confidence_score}: {', '.join(candidate.reasons)})"
        )
        return candidate.locator
    return None


DEFAULT_STRATEGIES: Sequence[Strategy] = (known_stable_strategy, scored_strategy)


class SelectorResolver:

    def __init__(self, thresholds: Optional[Thresholds] = None, strategies: Sequence[Strategy] = DEFAULT_STRATEGIES):
        self.thresholds = thresholds or Thresholds()
        self.strategies = tuple(strategies)

    async def resolve(self, page, query: str) -> Optional[Locator]:
        for strategy in self.strategies:
            try:
                locator = await strategy(page, query, self.thresholds)
            except Exception as e:
                logger.warning(f"Resolver strategy {strategy.__name__} failed: {e}")
                continue
            if locator is not None:
                logger.debug(f"Resolved {locator.selector} via {strategy.__name__}")
                return locator
        logger.info(f"No answer container found for {query!r}")
        return None
