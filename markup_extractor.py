"""
Markup Extractor - Query primitives over a parsed HTML document
================================================================
Collectors never touch BeautifulSoup directly. They ask for the first
text behind a selector, an attribute, the elements matching a selector,
or the first regex hit, so the parser backend can change without
touching collector logic.
"""

import re
from typing import Iterator, Optional, Pattern, Tuple, Union

from bs4 import BeautifulSoup
from bs4.element import Tag


DEFAULT_PARSER = "lxml"


def resolve_url(value: str, base_url: str) -> str:
    """
    Make an href/src absolute the way storefront links are usually written.

    Values that already start with http are kept, protocol-relative ones
    get https:, anything else is prefixed with the store URL as-is.
    """
    if not value:
        return ""
    if value.startswith("http"):
        return value
    if value.startswith("//"):
        return "https:" + value
    return f"{base_url}{value}"


class Element:
    """Read-only view of one matched element."""

    def __init__(self, tag: Tag):
        self._tag = tag

    @property
    def text(self) -> str:
        return self._tag.get_text().strip()

    def get(self, name: str, default: str = "") -> str:
        value = self._tag.get(name)
        if value is None:
            return default
        # multi-valued attributes (rel, class) come back as lists
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def __repr__(self):
        return f"Element(<{self._tag.name}>)"


class MarkupExtractor:
    """Selector and regex queries over one HTML document."""

    def __init__(self, html: str, parser: str = DEFAULT_PARSER):
        self.html = html or ""
        self.soup = BeautifulSoup(self.html, parser)

    def first(self, selector: str) -> Optional[Element]:
        tag = self.soup.select_one(selector)
        return Element(tag) if tag is not None else None

    def first_text(self, selector: str) -> str:
        """Trimmed text of the first match, or ''."""
        element = self.first(selector)
        return element.text if element else ""

    def all_text(self, selector: str) -> str:
        """Concatenated text of every match."""
        return "".join(tag.get_text() for tag in self.soup.select(selector))

    def attr(self, selector: str, name: str) -> str:
        """Attribute of the first match, or ''."""
        element = self.first(selector)
        return element.get(name) if element else ""

    def iter_elements(self, selector: str) -> Iterator[Tuple[int, Element]]:
        """Yield (position, element) for every match in document order."""
        for position, tag in enumerate(self.soup.select(selector)):
            yield position, Element(tag)

    def document_text(self) -> str:
        return self.soup.get_text()

    def first_regex(self, pattern: Union[str, Pattern], scope: Optional[str] = None) -> str:
        """
        First regex match in the raw HTML, or in the text of `scope` when a
        selector is given. Returns the whole match or ''.
        """
        haystack = self.html if scope is None else self.all_text(scope)
        match = re.search(pattern, haystack)
        return match.group(0) if match else ""
