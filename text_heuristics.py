"""
Regex heuristics for contact details, social profiles and article summaries.

Themes put this information wherever they like, so everything here is
best-effort: a miss returns '' (or an empty dict), never an error.
"""

import re
from typing import Dict, Optional, Pattern
from urllib.parse import unquote

from models import SOCIAL_PLATFORMS

# US "ST 12345[-6789]" or Canadian "A1A 1A1"
POSTAL_CODE_RE = re.compile(r"[A-Z]{2}\s+\d{5}(?:-\d{4})?|[A-Z][0-9][A-Z]\s*[0-9][A-Z][0-9]")

EMAIL_RE = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# Loose on purpose: international prefixes, optional area code in parens,
# space or dash separated groups. Expect false positives.
PHONE_RE = re.compile(
    r"\+?[0-9]{1,4}[\s-]?(?:\([0-9]{1,4}\)[\s-]?)?[0-9]{1,4}[\s-]?[0-9]{1,4}[\s-]?[0-9]{1,4}"
)

ADDRESS_CONTEXT = 100
SUMMARY_LENGTH = 200
ELLIPSIS = "..."


def _social_pattern(domain: str, path_prefix: str = "") -> re.Pattern:
    # scheme and subdomain, when present, are part of the match
    return re.compile(
        r"(?:https?:)?(?://)?(?:[A-Za-z0-9-]+\.)*"
        + re.escape(domain)
        + "/"
        + re.escape(path_prefix)
        + r"[^\"'\s<>]+"
    )


SOCIAL_PATTERNS = {
    "facebook": _social_pattern("facebook.com"),
    "instagram": _social_pattern("instagram.com"),
    "twitter": _social_pattern("twitter.com"),
    "pinterest": _social_pattern("pinterest.com"),
    "youtube": _social_pattern("youtube.com"),
    "tiktok": _social_pattern("tiktok.com", "@"),
}


def normalize_social_url(url: str) -> str:
    """
    'facebook.com/mystore'       -> 'https://facebook.com/mystore'
    '//www.facebook.com/mystore' -> 'https://www.facebook.com/mystore'
    """
    if url.startswith("http"):
        return url
    if url.startswith("//"):
        return "https:" + url
    return "https://" + url


def find_social_links(html: str) -> Dict[str, str]:
    """First profile link per platform found anywhere in the raw HTML."""
    links = {}
    for platform in SOCIAL_PLATFORMS:
        match = SOCIAL_PATTERNS[platform].search(html or "")
        if match:
            links[platform] = normalize_social_url(match.group(0))
    return links


def find_address_block(text: str) -> str:
    """
    Guess an address from free footer text.

    Finds the first postal-code shaped token and returns the text around
    it (ADDRESS_CONTEXT characters either side), trimmed.

    Input:  '... Visit us at 12 Main St, Springfield IL 62701 Mon-Fri ...'
    Output: '... 12 Main St, Springfield IL 62701 Mon-Fri ...'
    """
    if not text:
        return ""
    match = POSTAL_CODE_RE.search(text)
    if not match:
        return ""
    start = max(0, match.start() - ADDRESS_CONTEXT)
    end = min(len(text), match.start() + ADDRESS_CONTEXT)
    return text[start:end].strip()


def contact_from_link(href: str, scheme: str, pattern: Optional[Pattern] = None) -> str:
    """
    'mailto:hi@shop.com?subject=x' -> 'hi@shop.com'
    'mailto:%20hi@shop.com'         -> 'hi@shop.com'

    With `pattern`, a decoded value that does not fully match it is
    rejected ('') so the caller can look elsewhere.
    """
    if not href.lower().startswith(scheme):
        return ""
    value = unquote(href[len(scheme):].split("?")[0]).strip()
    if pattern is not None and not pattern.fullmatch(value):
        return ""
    return value


def summarize(text: str, length: int = SUMMARY_LENGTH) -> str:
    """Trim, cut to `length` characters and mark the cut."""
    return (text or "").strip()[:length] + ELLIPSIS
