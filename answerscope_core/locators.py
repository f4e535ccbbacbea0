"""
Locator Generator - Build Durable CSS Selectors

Turn an element record from the DOM snapshot into a selector that can re-find
the element later in the same page.

Strategies, in order:
1. Unique ID
2. Meaningful class + platform-assigned attribute, when it matches only this
   element in the whole document
3. Structural path (always available, least durable)
"""

import re
from typing import Dict, List, Optional

from .models import Locator, LocatorKind

# Attributes assigned by the host page's component framework. They survive
# restyles far better than class names.
PLATFORM_ATTRIBUTES = ("jsname", "data-ved")

# Selectors observed on real answer panels, best first.
KNOWN_STABLE_LOCATORS = (
    Locator('[data-container-id="main-col"] > *:first-child', LocatorKind.KNOWN_STABLE),
    Locator('div[jsname="htVhGf"]', LocatorKind.KNOWN_STABLE),
    Locator('div[jsname="RH7zg"]', LocatorKind.KNOWN_STABLE),
    Locator(".qJYHHd.maIobf", LocatorKind.KNOWN_STABLE),
    Locator(".tonYlb", LocatorKind.KNOWN_STABLE),
)

# Region watched by the stability monitor before anything is resolved.
BEST_KNOWN_REGION = KNOWN_STABLE_LOCATORS[0]

# Literal phrases that show up on a results listing but not inside an answer.
LISTING_FINGERPRINTS = (
    "people also ask",
    "related searches",
    "about this result",
)

_CSS_IDENT = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_-]*$")
_LETTER_DIGITS = re.compile(r"^[A-Za-z]\d+$")
_SHORT_TOKEN = re.compile(r"^[A-Za-z0-9]{1,8}$")


def matches_listing_fingerprint(text: str) -> bool:
    lower = (text or "").lower()
    return any(fp in lower for fp in LISTING_FINGERPRINTS)


def is_generated_class(name: str) -> bool:
    """
    Heuristic for minified/mangled class names.

    Short alphanumeric tokens with a digit or an inner capital ('a1', 'qJYHHd',
    'tonYlb') are treated as generated; so is anything with an underscore.
    """
    if len(name) <= 2:
        return True
    if "_" in name or _LETTER_DIGITS.match(name):
        return True
    if _SHORT_TOKEN.match(name):
        has_digit = any(ch.isdigit() for ch in name)
        has_inner_upper = any(ch.isupper() for ch in name[1:])
        return has_digit or has_inner_upper
    return False


def meaningful_classes(classes: List[str]) -> List[str]:
    return [c for c in classes if _CSS_IDENT.match(c) and not is_generated_class(c)]


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def platform_attribute(element: Dict) -> Optional[str]:
    """Attribute selector for the first platform attribute present, if any"""
    attributes = element.get("attributes") or {}
    for name in PLATFORM_ATTRIBUTES:
        value = attributes.get(name)
        if value:
            return f'[{name}="{_quote(value)}"]'
    return None


def synthesize_selector(element: Dict) -> str:
    tag = (element.get("tag") or "div").lower()

    element_id = element.get("id") or ""
    if element_id and element.get("idUnique"):
        if _CSS_IDENT.match(element_id):
            return f"{tag}#{element_id}"
        return f'{tag}[id="{_quote(element_id)}"]'

    # querySelector returns the first match in document order, so a shared
    # class would re-find some other element.
    matches = element.get("selectorMatches") or {}
    attr = platform_attribute(element) or ""
    keys = meaningful_classes(element.get("classes") or [])
    if attr:
        keys.append("")
    for key in keys:
        if matches.get(key) == 1:
            return f"{tag}.{key}{attr}" if key else f"{tag}{attr}"

    path = element.get("path")
    if path:
        return path
    return tag


def locator_for(element: Dict) -> Locator:
    return Locator(synthesize_selector(element), LocatorKind.INFERRED)
