"""
Models - Data types shared by the collectors and the scrape manager
====================================================================
Products, collections, blogs and articles stay plain dicts: they are
passed through from the storefront's JSON endpoints. Only the pieces the
scraper builds itself get a dataclass.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

SOCIAL_PLATFORMS = ("facebook", "instagram", "twitter", "pinterest", "youtube", "tiktok")

UNKNOWN_STORE_NAME = "Unknown Store"


@dataclass(frozen=True)
class StoreInfo:
    """Store identity and contact metadata derived from the homepage."""

    name: str = ""
    logo: str = ""
    favicon: str = ""
    address: str = ""
    email: str = ""
    phone: str = ""
    social_links: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        # social_links is exposed read-only
        object.__setattr__(self, "social_links", MappingProxyType(dict(self.social_links)))

    @classmethod
    def unknown(cls) -> "StoreInfo":
        """Default record used when the homepage could not be read at all."""
        return cls(name=UNKNOWN_STORE_NAME)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "logo": self.logo,
            "favicon": self.favicon,
            "address": self.address,
            "email": self.email,
            "phone": self.phone,
            "socialLinks": dict(self.social_links),
        }


@dataclass
class CollectorOutcome:
    """
    What a collector hands back to the manager.

    `source` names the endpoint or page that produced `items`. It is None
    when every source failed; `items` is then empty, which looks exactly
    like a store that simply has nothing of that kind.
    """

    items: List[Dict[str, Any]] = field(default_factory=list)
    source: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.source is not None

    @classmethod
    def empty(cls) -> "CollectorOutcome":
        return cls()


@dataclass
class Aggregate:
    """Everything scraped from one store in one request."""

    products: List[Dict[str, Any]] = field(default_factory=list)
    collections: List[Dict[str, Any]] = field(default_factory=list)
    blogs: List[Dict[str, Any]] = field(default_factory=list)
    articles: List[Dict[str, Any]] = field(default_factory=list)
    store_info: StoreInfo = field(default_factory=StoreInfo)

    @property
    def total_items(self) -> int:
        return len(self.products) + len(self.collections) + len(self.blogs) + len(self.articles)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form with the five top-level fields callers expect."""
        return {
            "products": self.products,
            "collections": self.collections,
            "blogs": self.blogs,
            "articles": self.articles,
            "storeInfo": self.store_info.to_dict(),
        }
