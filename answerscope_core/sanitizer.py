"""
Content Sanitizer

Removes page boilerplate that leaks into the answer text. Every rule is a
bounded removal anchored on a literal phrase; nothing rewrites the answer.

Rules run to a fixed point, so sanitize(sanitize(x)) == sanitize(x).
"""

import logging
import re
from typing import Pattern, Tuple

logger = logging.getLogger(__name__)

# Feedback/disclaimer panels appended after the answer. Each block starts at
# its anchor phrase and runs to the trailing "Close" button label.
FOOTER_ANCHORS = (
    "AI responses may include mistakes.",
    "Learn more",
    "Thank you",
    "Your feedback helps Google improve.",
    "See our Privacy Policy.",
    "Share more feedback",
    "Report a problem",
)

FOOTER_RULES: Tuple[Pattern, ...] = tuple(
    re.compile(re.escape(anchor) + r".*?Close\s*$", re.DOTALL)
    for anchor in FOOTER_ANCHORS
)

# Progress labels shown while the answer is generated.
PREAMBLE_RULES: Tuple[Pattern, ...] = (
    re.compile(r"^\s*Thinking\b\s*"),
    re.compile(r"^\s*Kicking off \d+ search(?:es)?\s*"),
    re.compile(r"^\s*Looking at \d+ sites?\s*"),
    re.compile(r"^\s*Putting it all together\s*"),
)

SCRIPT_RULES: Tuple[Pattern, ...] = (
    re.compile(r"\(function\s*\(\).*?\}\)\(\);?", re.DOTALL),
    re.compile(r"\bvar\s+\w+\s*=[^;]*;"),
    re.compile(r"\bfunction\s+\w+\s*\([^)]*\)\s*\{[^{}]*\}", re.DOTALL),
    re.compile(r"\b\w+\s*=\s*function\s*\([^)]*\)\s*\{[^{}]*\};?", re.DOTALL),
)

_INLINE_SPACE = re.compile(r"[^\S\n]+")
_NEWLINE_RUN = re.compile(r"\s*\n\s*")


def normalize_whitespace(text: str) -> str:
    text = _NEWLINE_RUN.sub("\n", text)
    text = _INLINE_SPACE.sub(" ", text)
    return text.strip()


def _single_pass(text: str) -> str:
    for rule in SCRIPT_RULES:
        text = rule.sub(" ", text)
    text = normalize_whitespace(text)
    for rule in FOOTER_RULES:
        text = rule.sub("", text)
    for rule in PREAMBLE_RULES:
        text = rule.sub("", text)
    return normalize_whitespace(text)


def sanitize(raw: str) -> str:
    # Every pass that changes the text makes it strictly shorter.
    text = raw or ""
    while True:
        cleaned = _single_pass(text)
        if cleaned == text:
            return cleaned
        text = cleaned


def sanitize_with_floor(raw: str, floor: int) -> str:
    """
    sanitize(), unless that would take substantial text below the floor.

    In that case the whitespace-normalised raw text is returned instead.
    """
    cleaned = sanitize(raw)
    if len(cleaned) >= floor:
        return cleaned
    fallback = normalize_whitespace(raw or "")
    if len(fallback) >= floor:
        logger.info(f"Sanitized text fell below {floor} chars ({len(cleaned)}); keeping raw text")
        return fallback
    return cleaned
