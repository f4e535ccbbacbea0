"""
Candidate Scorer - Score and Rank Answer Containers

Score every container in a DOM snapshot for "is this the generated answer".
No LLM - a fixed, additive rule set.

Scoring factors:
- Query relevance (verbatim query, query keywords)
- Answer phrasing (attribution, generation status)
- Prose structure (sentence density)
- Site chrome vocabulary (penalty)
- Platform-assigned attributes
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .config import Thresholds
from .dom_scripts import SNAPSHOT_SCRIPT
from .locators import PLATFORM_ATTRIBUTES, locator_for
from .models import Candidate

logger = logging.getLogger(__name__)

ATTRIBUTION_PHRASES = ("according to", "based on", "research shows", "studies indicate")
GENERATION_STATUS_PHRASES = ("thinking", "looking at", "putting it all together")
NAVIGATION_WORDS = ("search", "images", "videos")
LEGAL_PHRASES = ("cookie", "privacy policy", "sign in")

_SENTENCE_END = re.compile(r"[.!?]")


@dataclass(frozen=True)
class ScoringContext:
    """Everything a rule may look at, computed once per element"""
    text: str
    lower: str
    query: str
    query_words: Tuple[str, ...]
    attributes: Dict[str, str]
    thresholds: Thresholds


@dataclass(frozen=True)
class ScoringRule:
    reason: str
    weight: int
    predicate: Callable[[ScoringContext], bool]


def _query_match(ctx: ScoringContext) -> bool:
    return bool(ctx.query) and ctx.query in ctx.lower and len(ctx.text) > ctx.thresholds.substantial_chars


def _keyword_match(ctx: ScoringContext) -> bool:
    hits = sum(1 for word in ctx.query_words if word in ctx.lower)
    return hits >= 2


def _attribution(ctx: ScoringContext) -> bool:
    return any(p in ctx.lower for p in ATTRIBUTION_PHRASES)


def _generation_status(ctx: ScoringContext) -> bool:
    return any(p in ctx.lower for p in GENERATION_STATUS_PHRASES)


def _prose_structure(ctx: ScoringContext) -> bool:
    length = len(ctx.text)
    if length <= ctx.thresholds.structured_chars:
        return False
    sentences = len(_SENTENCE_END.findall(ctx.text))
    if sentences < ctx.thresholds.min_sentences:
        return False
    return sentences * 1000 / length >= ctx.thresholds.sentences_per_1000


def _site_chrome(ctx: ScoringContext) -> bool:
    navigation = all(w in ctx.lower for w in NAVIGATION_WORDS)
    return navigation or any(p in ctx.lower for p in LEGAL_PHRASES)


def _platform_attribute(ctx: ScoringContext) -> bool:
    return any(ctx.attributes.get(name) for name in PLATFORM_ATTRIBUTES)


DEFAULT_RULES: Tuple[ScoringRule, ...] = (
    ScoringRule("query_match", 40, _query_match),
    ScoringRule("keyword_match", 30, _keyword_match),
    ScoringRule("attribution_phrasing", 20, _attribution),
    ScoringRule("generation_status", 15, _generation_status),
    ScoringRule("prose_structure", 25, _prose_structure),
    ScoringRule("site_chrome", -40, _site_chrome),
    ScoringRule("platform_attribute", 10, _platform_attribute),
)


def query_keywords(query: str) -> Tuple[str, ...]:
    """Distinct query words longer than two characters, in query order"""
    seen: List[str] = []
    for word in query.lower().split():
        if len(word) > 2 and word not in seen:
            seen.append(word)
    return tuple(seen)


def apply_rules(ctx: ScoringContext, rules: Tuple[ScoringRule, ...] = DEFAULT_RULES) -> Tuple[int, Tuple[str, ...]]:
    """Fold the rules over one element; returns (score, reasons in rule order)"""
    score = 0
    reasons: List[str] = []
    for rule in rules:
        if rule.predicate(ctx):
            score += rule.weight
            reasons.append(rule.reason)
    return score, tuple(reasons)


def is_scorable(element: Dict, thresholds: Thresholds) -> bool:
    text = element.get("text") or ""
    if len(text) < thresholds.candidate_floor:
        return False
    return int(element.get("childContainers") or 0) <= thresholds.wrapper_fanout


def score_candidates(
    snapshot: List[Dict],
    query: str,
    thresholds: Optional[Thresholds] = None,
    rules: Tuple[ScoringRule, ...] = DEFAULT_RULES,
) -> List[Candidate]:
    """
    Score a DOM snapshot.

    Returns accepted candidates, best first (score, then text length).
    An empty list means no container was found.
    """
    thresholds = thresholds or Thresholds()
    normalized_query = " ".join(query.lower().split())
    keywords = query_keywords(normalized_query)

    candidates: List[Candidate] = []
    for element in snapshot:
        if not is_scorable(element, thresholds):
            continue
        text = element.get("text") or ""
        ctx = ScoringContext(
            text=text,
            lower=text.lower(),
            query=normalized_query,
            query_words=keywords,
            attributes=element.get("attributes") or {},
            thresholds=thresholds,
        )
        score, reasons = apply_rules(ctx, rules)
        if score <= thresholds.acceptance_threshold:
            continue
        candidates.append(Candidate(
            locator=locator_for(element),
            text_length=len(text),
            confidence_score=score,
            reasons=reasons,
            content_preview=text.strip()[:thresholds.preview_chars],
        ))

    candidates.sort(key=lambda c: (-c.confidence_score, -c.text_length))
    return candidates


async def take_snapshot(page, thresholds: Optional[Thresholds] = None) -> List[Dict]:
    """Collect element records from the live page; empty list on failure"""
    thresholds = thresholds or Thresholds()
    try:
        records = await page.evaluate(SNAPSHOT_SCRIPT, {
            "floor": thresholds.candidate_floor,
            "fanout": thresholds.wrapper_fanout,
            "tags": ["div"],
            "attributes": list(PLATFORM_ATTRIBUTES),
        })
    except Exception as e:
        logger.warning(f"DOM snapshot failed: {e}")
        return []
    return records or []


async def score_page(page, query: str, thresholds: Optional[Thresholds] = None) -> List[Candidate]:
    snapshot = await take_snapshot(page, thresholds)
    candidates = score_candidates(snapshot, query, thresholds)
    if candidates:
        top = candidates[0]
        logger.debug(
            f"Scored {len(snapshot)} elements, {len(candidates)} accepted; "
            f"top {top.locator.selector} ({top.confidence_score}: {', '.join(top.reasons)})"
        )
    else:
        logger.debug(f"Scored {len(snapshot)} elements, none accepted")
    return candidates
