#!/usr/bin/env python3
import logging
from typing import Any, Dict, List, Optional

from .dom_scripts import READ_CONTAINER_SCRIPT, READ_REGION_TEXT_SCRIPT

logger = logging.getLogger(__name__)


async def accept_cookies(page) -> bool:
    """Best-effort consent dismissal; never raises"""
    try:
        names: List[str] = [
            "Accept all", "I agree", "Accept",
        ]
        for name in names:
            try:
                btn = page.get_by_role("button", name=name)
                if await btn.count() > 0:
                    await btn.first.click(timeout=1000)
                    return True
            except Exception:
                pass
        selectors: List[str] = [
            'button:has-text("Accept all")',
            'button:has-text("I agree")',
            '#L2AGLb',
            'button[aria-label*="accept" i]',
        ]
        for sel in selectors:
            try:
                loc = page.locator(sel)
                if await loc.count() > 0:
                    await loc.first.click(timeout=1000)
                    return True
            except Exception:
                pass
    except Exception as e:
        logger.debug(f"Consent dismissal skipped: {e}")
    return False


async def read_region_text(page, selector: str) -> str:
    """Trimmed textContent of the first match, '' when absent. May raise."""
    text = await page.evaluate(READ_REGION_TEXT_SCRIPT, selector)
    return text or ""


async def element_text(page, selector: str) -> Optional[str]:
    """textContent via a live element handle; None when the selector finds nothing"""
    try:
        element = await page.query_selector(selector)
        if element is None:
            return None
        return await element.text_content()
    except Exception as e:
        logger.debug(f"Reading {selector} failed: {e}")
        return None


async def read_container(page, selector: str) -> Optional[Dict[str, Any]]:
    """Script-free text and links of a container; None when absent or unreadable"""
    try:
        return await page.evaluate(READ_CONTAINER_SCRIPT, selector)
    except Exception as e:
        logger.warning(f"Reading container {selector} failed: {e}")
        return None
