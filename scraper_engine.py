"""
Scraper Engine - Runs every collector against one store
========================================================
Provides the single operation callers see: give it a store URL, get back
the aggregate dataset or one top-level failure.

Components:
- ScrapeManager: sequences StoreInfo -> Products -> Collections -> Blogs,
  then fans out Articles per discovered blog
- scrape_store: convenience wrapper returning the JSON-ready dict
- MissingStoreUrlError / ScrapeFailedError: the only failures a caller sees

Collectors absorb upstream failures themselves, so a store whose endpoints
are all unreachable still yields an (empty) aggregate. Only an exception
that escapes every collector fails the request.
"""

import logging
from contextlib import nullcontext
from typing import Any, Dict, Optional

from collectors import (
    ArticleCollector,
    BlogCollector,
    CollectionCollector,
    ProductCollector,
    StoreInfoCollector,
    map_in_order,
)
from fetcher import FetchConfig, Fetcher
from models import Aggregate
from store_profiles import DEFAULT_PROFILE, StoreProfile, get_store_profile

logger = logging.getLogger(__name__)


# =============================================================================
# REQUEST-LEVEL ERRORS
# =============================================================================

class ScrapeError(Exception):
    """Base class for failures reported to the caller."""

    message = "Scrape failed"

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details

    def to_payload(self) -> Dict[str, str]:
        payload = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class MissingStoreUrlError(ScrapeError, ValueError):
    message = "Store URL is required"


class ScrapeFailedError(ScrapeError):
    message = "Failed to scrape the store data"


# =============================================================================
# SCRAPE MANAGER
# =============================================================================

class ScrapeManager:
    """Orchestrates the collectors for one store at a time."""

    def __init__(self, fetcher: Optional[Fetcher] = None,
                 profile: Optional[StoreProfile] = None,
                 config: Optional[FetchConfig] = None):
        self.config = config or (fetcher.config if fetcher else FetchConfig())
        self.profile = profile or get_store_profile()
        self._fetcher = fetcher

    def _open_fetcher(self):
        # an injected fetcher belongs to the caller; otherwise one per request
        if self._fetcher is not None:
            return nullcontext(self._fetcher)
        return Fetcher(self.config)

    def scrape(self, store_url: str) -> Aggregate:
        """Scrape everything for `store_url`. The URL is used as given."""
        if not store_url or not store_url.strip():
            raise MissingStoreUrlError()

        logger.info("=" * 70)
        logger.info(f"Scraping {store_url} ({self.profile.name} profile)")
        logger.info("=" * 70)

        try:
            with self._open_fetcher() as fetcher:
                aggregate = self._run(fetcher, store_url)
        except Exception as e:
            logger.error(f"Scraping error for {store_url}: {e}")
            raise ScrapeFailedError(details=str(e)) from e

        self._print_summary(aggregate)
        return aggregate

    def _run(self, fetcher: Fetcher, store_url: str) -> Aggregate:
        workers = self.config.max_workers
        aggregate = Aggregate()

        aggregate.store_info = StoreInfoCollector(fetcher, self.profile).collect(store_url)
        logger.info(f"Store: {aggregate.store_info.name or 'N/A'}")

        products = ProductCollector(fetcher, self.profile).collect(store_url)
        aggregate.products = products.items
        self._log_outcome("products", products)

        collections = CollectionCollector(fetcher, self.profile, workers).collect(store_url)
        aggregate.collections = collections.items
        self._log_outcome("collections", collections)

        blogs = BlogCollector(fetcher, self.profile).collect(store_url)
        aggregate.blogs = blogs.items
        self._log_outcome("blogs", blogs)

        article_collector = ArticleCollector(fetcher, self.profile)
        per_blog = map_in_order(
            lambda blog: article_collector.collect(store_url, blog.get("handle")).items,
            aggregate.blogs,
            workers,
        )
        for blog, articles in zip(aggregate.blogs, per_blog):
            blog["articles"] = articles
            aggregate.articles.extend(articles)
            logger.info(f"  Blog '{blog.get('handle')}': {len(articles)} articles")

        return aggregate

    def _log_outcome(self, kind: str, outcome) -> None:
        if outcome.ok:
            logger.info(f"✓ {len(outcome.items)} {kind} from {outcome.source}")
        else:
            logger.info(f"✗ No {kind} found")

    def _print_summary(self, aggregate: Aggregate) -> None:
        logger.info("=" * 70)
        logger.info("SCRAPING COMPLETE")
        logger.info(f"Products: {len(aggregate.products)}")
        logger.info(f"Collections: {len(aggregate.collections)}")
        logger.info(f"Blogs: {len(aggregate.blogs)}")
        logger.info(f"Articles: {len(aggregate.articles)}")
        logger.info(f"Total items: {aggregate.total_items}")
        logger.info("=" * 70)


def scrape_store(store_url: str, profile_key: str = DEFAULT_PROFILE,
                 config: Optional[FetchConfig] = None,
                 fetcher: Optional[Fetcher] = None) -> Dict[str, Any]:
    """Scrape a store and return the JSON-ready aggregate."""
    manager = ScrapeManager(fetcher=fetcher, profile=get_store_profile(profile_key), config=config)
    return manager.scrape(store_url).to_dict()
