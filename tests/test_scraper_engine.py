import pytest

import collectors
from models import StoreInfo
from scraper_engine import (
    MissingStoreUrlError,
    ScrapeFailedError,
    ScrapeManager,
    scrape_store,
)


def _blog_store(fake_store):
    return fake_store({
        "/": "<html><head><title>Blog Shop</title></head><body></body></html>",
        "/products.json": {"products": [{"id": 1, "handle": "tee", "title": "Tee"}]},
        "/collections.json": {"collections": []},
        "/blogs.json": {"blogs": [
            {"id": 10, "handle": "news", "title": "News"},
            {"id": 11, "handle": "journal", "title": "Journal"},
            {"id": 12, "handle": "archive", "title": "Archive"},
        ]},
        "/blogs/news/articles.json": {"articles": [
            {"id": 1, "title": "First", "content": "<p>One</p>"},
            {"id": 2, "title": "Second", "content": "<p>Two</p>"},
        ]},
        "/blogs/journal/articles.json": {"articles": [
            {"id": 3, "title": "Third"},
        ]},
    })


def test_unreachable_store_yields_empty_aggregate(fake_store, store_url):
    store = fake_store(unreachable=True)
    data = ScrapeManager(fetcher=store.fetcher()).scrape(store_url).to_dict()

    assert data == {
        "products": [],
        "collections": [],
        "blogs": [],
        "articles": [],
        "storeInfo": StoreInfo.unknown().to_dict(),
    }
    assert store.requests


def test_articles_flattened_in_blog_order(fake_store, store_url):
    store = _blog_store(fake_store)
    aggregate = ScrapeManager(fetcher=store.fetcher(max_workers=3)).scrape(store_url)

    assert aggregate.store_info.name == "Blog Shop"
    assert [a["id"] for a in aggregate.articles] == [1, 2, 3]
    news, journal, archive = aggregate.blogs
    assert [a["id"] for a in news["articles"]] == [1, 2]
    assert news["articles"][0]["summary"] == "One..."
    assert journal["articles"] == [{"id": 3, "title": "Third"}]
    # archive has no articles endpoint: empty, and siblings unaffected
    assert archive["articles"] == []
    assert aggregate.collections == []
    assert aggregate.total_items == 1 + 3 + 3


def test_blank_url_rejected_before_any_request(fake_store):
    store = fake_store()
    manager = ScrapeManager(fetcher=store.fetcher())
    with pytest.raises(MissingStoreUrlError) as exc:
        manager.scrape("   ")
    assert store.requests == []
    assert exc.value.to_payload() == {"error": "Store URL is required"}


def test_unexpected_error_is_a_scrape_failure(fake_store, store_url, monkeypatch):
    def boom(self, store_url):
        raise RuntimeError("collector exploded")

    monkeypatch.setattr(collectors.ProductCollector, "collect", boom)
    store = fake_store({"/": "<html></html>"})

    with pytest.raises(ScrapeFailedError) as exc:
        ScrapeManager(fetcher=store.fetcher()).scrape(store_url)
    assert exc.value.to_payload() == {
        "error": "Failed to scrape the store data",
        "details": "collector exploded",
    }


def test_scrape_store_returns_json_ready_dict(fake_store, store_url):
    store = _blog_store(fake_store)
    data = scrape_store(store_url, fetcher=store.fetcher())

    assert set(data) == {"products", "collections", "blogs", "articles", "storeInfo"}
    assert data["storeInfo"]["socialLinks"] == {}
    assert len(data["articles"]) == 3


def test_scrape_store_unknown_profile():
    with pytest.raises(ValueError):
        scrape_store("https://shop.test", profile_key="magento")
