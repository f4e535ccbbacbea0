#!/usr/bin/env python3
from dataclasses import dataclass, field, replace
import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

DEFAULT_SEARCH_URL = (
    "https://www.google.com/search?authuser=0&udm=50&aep=25&hl=en&source=searchlabs&q={query}"
)


@dataclass
class Config:
    """Application configuration"""
    headless: bool = os.getenv("ANSWERSCOPE_HEADLESS", "true").lower() in ["true", "1", "yes"]
    user_agent: str = os.getenv("ANSWERSCOPE_USER_AGENT", DEFAULT_USER_AGENT)
    locale: str = os.getenv("ANSWERSCOPE_LOCALE", "en-US")
    search_url: str = os.getenv("ANSWERSCOPE_SEARCH_URL", DEFAULT_SEARCH_URL)

    # Per-query deadlines
    timeout_ms: int = int(os.getenv("ANSWERSCOPE_TIMEOUT_MS", "60000"))
    navigation_timeout_ms: int = int(os.getenv("ANSWERSCOPE_NAVIGATION_TIMEOUT_MS", "30000"))

    # Stability monitor
    quiet_period_ms: int = int(os.getenv("ANSWERSCOPE_QUIET_PERIOD_MS", "2000"))
    poll_interval_ms: int = int(os.getenv("ANSWERSCOPE_POLL_INTERVAL_MS", "500"))
    stability_deadline_ms: int = int(os.getenv("ANSWERSCOPE_STABILITY_DEADLINE_MS", "30000"))

    log_level: str = os.getenv("ANSWERSCOPE_LOG_LEVEL", "WARNING").upper()
    enable_debug: bool = os.getenv("ANSWERSCOPE_DEBUG", "false").lower() in ["true", "1", "yes"]


@dataclass(frozen=True)
class Thresholds:
    """
    Tuned numbers shared by the scorer, the resolver and the orchestrator.

    substance_floor gates the final verdict and the stability check,
    candidate_floor gates which elements the scorer looks at at all.
    """
    substance_floor: int = 100
    candidate_floor: int = 500
    locator_min_chars: int = 500
    substantial_chars: int = 1000
    structured_chars: int = 2000
    min_sentences: int = 10
    sentences_per_1000: float = 2.0
    wrapper_fanout: int = 10
    acceptance_threshold: int = 50
    preview_chars: int = 200


@dataclass
class SearchOptions:
    """
    Per-call options for the programmatic and CLI surfaces.

    retries is consumed by the retry layer in api.py; a single extraction
    always makes exactly one attempt.
    """
    timeout_ms: int = 60000
    retries: int = 1
    headless: bool = True
    user_agent: Optional[str] = None
    delay_ms: int = 0
    locale: str = "en-US"
    navigation_timeout_ms: int = 30000
    quiet_period_ms: int = 2000
    poll_interval_ms: int = 500
    stability_deadline_ms: int = 30000
    search_url: str = DEFAULT_SEARCH_URL
    thresholds: Thresholds = field(default_factory=Thresholds)

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None, **overrides) -> "SearchOptions":
        cfg = cfg or config
        options = cls(
            timeout_ms=cfg.timeout_ms,
            headless=cfg.headless,
            user_agent=cfg.user_agent,
            locale=cfg.locale,
            navigation_timeout_ms=cfg.navigation_timeout_ms,
            quiet_period_ms=cfg.quiet_period_ms,
            poll_interval_ms=cfg.poll_interval_ms,
            stability_deadline_ms=cfg.stability_deadline_ms,
            search_url=cfg.search_url,
        )
        return replace(options, **overrides) if overrides else options


config = Config()
