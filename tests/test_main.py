import json

import main
from store_profiles import get_store_profile, list_profiles


def test_normalize_store_url():
    assert main.normalize_store_url("mystore.myshopify.com") == "https://mystore.myshopify.com"
    assert main.normalize_store_url("http://shop.test/") == "http://shop.test"
    assert main.normalize_store_url("  https://shop.test  ") == "https://shop.test"
    assert main.normalize_store_url("") == ""
    assert main.normalize_store_url(None) == ""


def test_output_filename():
    assert main.output_filename("https://shop.test") == "https___shop_test_data.json"


def test_missing_url_exit_code(capsys):
    assert main.main([]) == 2
    err = capsys.readouterr().err
    assert json.loads(err.strip().splitlines()[-1]) == {"error": "Store URL is required"}


def test_list_profiles(capsys):
    assert main.main(["--list"]) == 0
    assert "shopify" in capsys.readouterr().out


def test_scrape_writes_dataset(monkeypatch, tmp_path):
    calls = {}

    def fake_scrape(store_url, profile_key, config):
        calls["url"] = store_url
        calls["workers"] = config.max_workers
        return {"products": [], "collections": [], "blogs": [], "articles": [], "storeInfo": {}}

    monkeypatch.setattr(main, "scrape_store", fake_scrape)
    target = tmp_path / "out.json"

    assert main.main(["shop.test/", "--workers", "2", "-o", str(target)]) == 0
    assert calls == {"url": "https://shop.test", "workers": 2}
    assert json.loads(target.read_text())["products"] == []


def test_profile_registry():
    assert "shopify" in list_profiles()
    profile = get_store_profile("shopify")
    assert profile.url("https://shop.test", profile.articles_endpoint, handle="news") == \
        "https://shop.test/blogs/news/articles.json"
