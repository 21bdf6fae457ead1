"""
Store Profiles - Endpoint and selector configuration per storefront platform
=============================================================================
Each profile tells the collectors where the structured endpoints live and
which selectors the HTML fallbacks should use. Collectors try the JSON
endpoints first and only read markup when those fail.

To add a new platform:
1. Create a StoreProfile with its endpoint paths (relative to the store URL)
2. Override any selectors whose defaults do not fit its themes
3. Register it in STORE_PROFILES
"""

from dataclasses import dataclass, field
from typing import Dict, List


DEFAULT_SELECTORS = {
    "title": "title",
    "site_name": 'meta[property="og:site_name"]',
    "og_image": 'meta[property="og:image"]',
    "header_logo": "header img",
    "favicon": 'link[rel~="icon"]',
    "footer": "footer",
    "address": 'footer address, footer .address, footer [itemtype*="PostalAddress"]',
    "mailto": 'a[href^="mailto:"]',
    "tel": 'a[href^="tel:"]',
    "collection_links": 'a[href*="/collections/"]',
    "blog_links": 'a[href*="/blogs/"]',
    "summary_block": "p",
}


@dataclass
class StoreProfile:
    """Configuration for one storefront platform."""

    name: str
    key: str

    # Structured endpoints, tried in order
    product_endpoints: List[str] = field(default_factory=list)
    collections_endpoint: str = ""
    collection_detail_endpoint: str = ""
    blogs_endpoint: str = ""
    articles_endpoint: str = ""

    # HTML fallbacks
    collections_page: str = ""
    blogs_page: str = ""

    selectors: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_SELECTORS))

    def url(self, store_url: str, path: str, **params: str) -> str:
        """Join an endpoint path onto the store URL (no normalization)."""
        return f"{store_url}{path.format(**params)}"

    def selector(self, name: str) -> str:
        return self.selectors.get(name) or DEFAULT_SELECTORS[name]


# =============================================================================
# SHOPIFY
# =============================================================================
# Every Shopify storefront serves these JSON views unless the theme or an
# app blocks them. products.json can be disabled while the "all" collection
# view still answers.

SHOPIFY = StoreProfile(
    name="Shopify",
    key="shopify",
    product_endpoints=[
        "/products.json",
        "/collections/all.json",
    ],
    collections_endpoint="/collections.json",
    collection_detail_endpoint="/collections/{handle}.json",
    blogs_endpoint="/blogs.json",
    articles_endpoint="/blogs/{handle}/articles.json",
    collections_page="/collections",
    blogs_page="",
)


# =============================================================================
# PROFILE REGISTRY
# =============================================================================

STORE_PROFILES = {
    "shopify": SHOPIFY,
}

DEFAULT_PROFILE = "shopify"


def get_store_profile(key: str = DEFAULT_PROFILE) -> StoreProfile:
    """Get a store profile by key."""
    if key not in STORE_PROFILES:
        available = ", ".join(STORE_PROFILES.keys())
        raise ValueError(f"Unknown store profile '{key}'. Available: {available}")
    return STORE_PROFILES[key]


def list_profiles() -> list:
    """Return list of available profile keys."""
    return list(STORE_PROFILES.keys())
