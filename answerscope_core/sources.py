"""
Source links cited inside the answer panel.
"""

from typing import Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlparse

from .models import Source

MAX_SOURCES = 10


def domain_of(url: str) -> str:
    host = (urlparse(url).hostname or "").lower()
    return host[4:] if host.startswith("www.") else host


def _is_search_host(domain: str, search_domain: str) -> bool:
    if not search_domain:
        return False
    return domain == search_domain or domain.endswith("." + search_domain)


def parse_sources(
    links: Iterable[Dict[str, str]],
    search_url: Optional[str] = None,
    limit: int = MAX_SOURCES,
) -> Optional[Tuple[Source, ...]]:
    """
    Turn raw anchors ({href, text, label}) into Source records.

    Keeps http(s) links that leave the search host, first occurrence per URL.
    Returns None when nothing qualifies.
    """
    search_domain = domain_of(search_url) if search_url else ""
    seen = set()
    sources: List[Source] = []
    for link in links or []:
        url = (link.get("href") or "").strip()
        if urlparse(url).scheme not in ("http", "https"):
            continue
        domain = domain_of(url)
        if not domain or _is_search_host(domain, search_domain):
            continue
        if url in seen:
            continue
        seen.add(url)
        title = " ".join((link.get("text") or link.get("label") or domain).split())
        sources.append(Source(title=title, url=url, domain=domain))
        if len(sources) >= limit:
            break
    return tuple(sources) if sources else None
