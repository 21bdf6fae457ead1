"""
Collectors - One slice of the store dataset each, with built-in fallback
=========================================================================
Every collector tries its sources in priority order (structured JSON
endpoints first, scraped HTML last) and keeps the first one that works.
Failures are logged and absorbed here: a collector hands back an empty
outcome rather than raising because an endpoint is missing or broken.

Components:
- StoreInfoCollector: name, logo, favicon, contact details from the homepage
- ProductCollector: products.json, then the "all" collection view
- CollectionCollector: collections.json + per-collection detail, then HTML links
- BlogCollector: blogs.json, then homepage links
- ArticleCollector: per-blog articles.json, content reduced to a summary
"""

import logging
import re
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from fetcher import DEFAULT_WORKERS, FetchError, Fetcher, MalformedResponseError
from markup_extractor import MarkupExtractor, resolve_url
from models import CollectorOutcome, StoreInfo
from store_profiles import StoreProfile, get_store_profile
from text_heuristics import (
    EMAIL_RE,
    PHONE_RE,
    contact_from_link,
    find_address_block,
    find_social_links,
    summarize,
)

logger = logging.getLogger(__name__)

Source = Tuple[str, Callable[[], List[Dict[str, Any]]]]


def map_in_order(fn: Callable, items: Iterable, max_workers: int = DEFAULT_WORKERS) -> list:
    """
    Apply fn to every item on a bounded thread pool.

    Results come back in input order, not completion order. fn is expected
    to absorb its own failures so one item cannot sink its siblings.
    """
    items = list(items)
    if max_workers <= 1 or len(items) <= 1:
        return [fn(item) for item in items]
    with ThreadPoolExecutor(max_workers=min(max_workers, len(items))) as executor:
        return list(executor.map(fn, items))


def _handle_after(href: str, marker: str) -> Tuple[str, List[str]]:
    """'/collections/shirts/x?y' with '/collections/' -> ('shirts', ['shirts', 'x'])"""
    rest = re.split(r"[?#]", href.split(marker, 1)[1])[0]
    parts = rest.split("/")
    return parts[0], parts


# =============================================================================
# COLLECTOR BASE CLASS
# =============================================================================

class Collector(ABC):
    """Base class for all collectors."""

    name: str = "base"

    def __init__(self, fetcher: Fetcher, profile: Optional[StoreProfile] = None,
                 max_workers: int = DEFAULT_WORKERS):
        self.fetcher = fetcher
        self.profile = profile or get_store_profile()
        self.max_workers = max_workers

    @abstractmethod
    def collect(self, store_url: str, *args):
        """Produce this collector's slice for one store. Never raises for upstream failures."""
        pass

    def _first_source(self, store_url: str, sources: List[Source]) -> CollectorOutcome:
        """Try sources in order; the first one that does not fail wins outright."""
        for source_name, load in sources:
            try:
                items = load()
            except FetchError as e:
                logger.warning(f"{self.name}: {source_name} failed for {store_url}: {e}")
                continue
            logger.debug(f"{self.name}: {len(items)} items from {source_name}")
            return CollectorOutcome(items=items, source=source_name)

        logger.warning(f"{self.name}: every source failed for {store_url}, returning nothing")
        return CollectorOutcome.empty()

    def _get_list(self, url: str, field: str) -> List[Any]:
        items = self.fetcher.get_json(url, field)
        if not isinstance(items, list):
            raise MalformedResponseError(f"{url}: '{field}' is not a list", url=url)
        return items

    def _scrape_links(self, store_url: str, html: str, selector: str, marker: str,
                      skip: Callable[[str, List[str]], bool], id_format: str) -> List[Dict[str, Any]]:
        """
        Turn anchors pointing at /<kind>/<handle> into minimal records.

        The handle is the path segment after `marker`. Anchors without text
        are ignored and the first anchor per handle wins, in document order.
        The id is the anchor's position in the scan, so it is only stable
        within one scrape.
        """
        page = MarkupExtractor(html)
        found = []
        seen = set()

        for position, anchor in page.iter_elements(selector):
            href = anchor.get("href")
            if not href or marker not in href:
                continue
            handle, parts = _handle_after(href, marker)
            if not handle or handle in seen or skip(href, parts):
                continue
            title = anchor.text
            if not title:
                continue

            seen.add(handle)
            found.append({
                "id": id_format.format(position),
                "handle": handle,
                "title": title,
                "url": resolve_url(href, store_url),
            })

        if not found:
            raise MalformedResponseError(f"no {marker.strip('/')} links found")
        return found


# =============================================================================
# STORE INFO
# =============================================================================

class StoreInfoCollector(Collector):
    """Derives store identity and contact metadata from the homepage."""

    name = "store_info"

    def collect(self, store_url: str) -> StoreInfo:
        try:
            html = self.fetcher.get_text(store_url)
        except FetchError as e:
            logger.warning(f"{self.name}: homepage unavailable for {store_url}: {e}")
            return StoreInfo.unknown()

        page = MarkupExtractor(html)
        info = StoreInfo(
            name=self._name(page),
            logo=self._logo(page, store_url),
            favicon=resolve_url(page.attr(self.profile.selector("favicon"), "href"), store_url),
            address=self._address(page),
            email=self._email(page),
            phone=self._phone(page),
            social_links=find_social_links(html),
        )
        logger.debug(f"{self.name}: {info}")
        return info

    def _name(self, page: MarkupExtractor) -> str:
        title = page.first_text(self.profile.selector("title")).split("|")[0].strip()
        if title:
            return title
        return page.attr(self.profile.selector("site_name"), "content").strip()

    def _logo(self, page: MarkupExtractor, store_url: str) -> str:
        logo = page.attr(self.profile.selector("og_image"), "content")
        if logo:
            return logo
        return resolve_url(page.attr(self.profile.selector("header_logo"), "src"), store_url)

    def _address(self, page: MarkupExtractor) -> str:
        # dedicated markup first, then a postal-code window over the footer
        address = page.first_text(self.profile.selector("address"))
        if address:
            return address
        return find_address_block(page.all_text(self.profile.selector("footer")))

    def _email(self, page: MarkupExtractor) -> str:
        linked = contact_from_link(page.attr(self.profile.selector("mailto"), "href"), "mailto:", EMAIL_RE)
        return linked or page.first_regex(EMAIL_RE)

    def _phone(self, page: MarkupExtractor) -> str:
        linked = contact_from_link(page.attr(self.profile.selector("tel"), "href"), "tel:")
        return linked or page.first_regex(PHONE_RE).strip()


# =============================================================================
# PRODUCTS
# =============================================================================

class ProductCollector(Collector):
    """Product catalog from the listing endpoint, or the "all" collection view."""

    name = "products"

    def collect(self, store_url: str) -> CollectorOutcome:
        sources = [
            (path, partial(self._load, self.profile.url(store_url, path)))
            for path in self.profile.product_endpoints
        ]
        return self._first_source(store_url, sources)

    def _load(self, url: str) -> List[Dict[str, Any]]:
        return self._get_list(url, "products")


# =============================================================================
# COLLECTIONS
# =============================================================================

class CollectionCollector(Collector):
    """Collections from collections.json with per-collection detail, or scraped links."""

    name = "collections"

    def collect(self, store_url: str) -> CollectorOutcome:
        profile = self.profile
        sources = [
            (profile.collections_endpoint, partial(self._from_listing, store_url)),
            (profile.collections_page or "/", partial(self._from_html, store_url)),
        ]
        return self._first_source(store_url, sources)

    def _from_listing(self, store_url: str) -> List[Dict[str, Any]]:
        listing = self._get_list(self.profile.url(store_url, self.profile.collections_endpoint),
                                 "collections")
        return map_in_order(partial(self._with_detail, store_url), listing, self.max_workers)

    def _with_detail(self, store_url: str, collection: Any) -> Any:
        """Overlay the detail record onto the listing entry; keep the entry as-is if that fails."""
        if not isinstance(collection, dict) or not collection.get("handle"):
            return collection

        handle = collection["handle"]
        url = self.profile.url(store_url, self.profile.collection_detail_endpoint, handle=handle)
        try:
            detail = self.fetcher.get_json(url, "collection")
            if not isinstance(detail, dict):
                raise MalformedResponseError(f"{url}: 'collection' is not an object", url=url)
        except FetchError as e:
            logger.warning(f"{self.name}: no details for collection {handle}: {e}")
            return dict(collection)

        return {**collection, **detail}

    def _from_html(self, store_url: str) -> List[Dict[str, Any]]:
        html = self.fetcher.get_text(self.profile.url(store_url, self.profile.collections_page))
        return self._scrape_links(
            store_url, html,
            selector=self.profile.selector("collection_links"),
            marker="/collections/",
            skip=lambda href, parts: "/products/" in href or parts[0] == "all",
            id_format="{}",
        )


# =============================================================================
# BLOGS
# =============================================================================

class BlogCollector(Collector):
    """Blogs from blogs.json, or links scraped from the homepage."""

    name = "blogs"

    def collect(self, store_url: str) -> CollectorOutcome:
        profile = self.profile
        sources = [
            (profile.blogs_endpoint, partial(self._from_listing, store_url)),
            (profile.blogs_page or "/", partial(self._from_html, store_url)),
        ]
        return self._first_source(store_url, sources)

    def _from_listing(self, store_url: str) -> List[Dict[str, Any]]:
        blogs = self._get_list(self.profile.url(store_url, self.profile.blogs_endpoint), "blogs")
        return [dict(blog) for blog in blogs if isinstance(blog, dict)]

    def _from_html(self, store_url: str) -> List[Dict[str, Any]]:
        html = self.fetcher.get_text(self.profile.url(store_url, self.profile.blogs_page))
        return self._scrape_links(
            store_url, html,
            selector=self.profile.selector("blog_links"),
            marker="/blogs/",
            # tag archives, e.g. /blogs/news/tagged/summer
            skip=lambda href, parts: len(parts) > 1 and parts[1] == "tagged",
            id_format="blog_{}",
        )


# =============================================================================
# ARTICLES
# =============================================================================

class ArticleCollector(Collector):
    """Articles of one blog, with their rich content reduced to a plain-text summary."""

    name = "articles"

    def collect(self, store_url: str, blog_handle: Optional[str] = None) -> CollectorOutcome:
        if not blog_handle:
            logger.warning(f"{self.name}: blog without a handle on {store_url}, skipping")
            return CollectorOutcome.empty()

        path = self.profile.articles_endpoint
        sources = [(path.format(handle=blog_handle), partial(self._load, store_url, blog_handle))]
        return self._first_source(store_url, sources)

    def _load(self, store_url: str, blog_handle: str) -> List[Dict[str, Any]]:
        url = self.profile.url(store_url, self.profile.articles_endpoint, handle=blog_handle)
        return [self._summarize(article) for article in self._get_list(url, "articles")]

    def _summarize(self, article: Any) -> Any:
        if not isinstance(article, dict) or not article.get("content"):
            return article

        fragment = MarkupExtractor(str(article["content"]))
        block = fragment.first(self.profile.selector("summary_block"))
        text = block.text if block else fragment.document_text()

        # the full content is dropped for good; only the summary travels on
        record = {key: value for key, value in article.items() if key != "content"}
        record["summary"] = summarize(text)
        return record
