#!/usr/bin/env python3
"""
Storefront Scraper - Products, collections, blogs, articles and store info
===========================================================================
Pulls a store's public dataset through its JSON endpoints, falling back
to HTML scraping where a theme hides them, and writes it out as one JSON
document.

Usage:
    python main.py mystore.myshopify.com
    python main.py https://shop.example.com --output shop.json
    python main.py --list
"""

import argparse
import json
import logging
import re
import sys
from typing import List, Optional

from fetcher import FetchConfig
from scraper_engine import MissingStoreUrlError, ScrapeFailedError, scrape_store
from store_profiles import DEFAULT_PROFILE, get_store_profile, list_profiles

logger = logging.getLogger(__name__)


def normalize_store_url(store_url: str) -> str:
    """
    Prefix https:// when no http(s) scheme is given and drop one trailing
    slash. The scraper itself uses whatever URL it receives.
    """
    url = (store_url or "").strip()
    if not url:
        return ""
    if not url.startswith("http"):
        url = f"https://{url}"
    return re.sub(r"/$", "", url)


def output_filename(store_url: str) -> str:
    """'https://shop.example.com' -> 'https___shop_example_com_data.json'"""
    return f"{re.sub(r'[^a-zA-Z0-9]', '_', store_url)}_data.json"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scrape a storefront's public catalog and content.")
    parser.add_argument("store_url", nargs="?", help="Store URL or domain")
    parser.add_argument("-o", "--output", help="Write JSON here ('auto' derives a name from the URL)")
    parser.add_argument("--profile", default=DEFAULT_PROFILE, help="Store profile key")
    parser.add_argument("--workers", type=int, help="Parallel detail/article fetches")
    parser.add_argument("--timeout", type=float, help="Per-request timeout in seconds (0 disables)")
    parser.add_argument("--list", action="store_true", help="List store profiles and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the scraper."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )

    if args.list:
        print("Available store profiles:")
        for key in list_profiles():
            profile = get_store_profile(key)
            print(f"  {key}: {profile.name} (products: {', '.join(profile.product_endpoints)})")
        return 0

    config = FetchConfig.from_env()
    if args.workers is not None:
        config.max_workers = max(1, args.workers)
    if args.timeout is not None:
        config.timeout = args.timeout or None

    store_url = normalize_store_url(args.store_url)
    try:
        data = scrape_store(store_url, profile_key=args.profile, config=config)
    except MissingStoreUrlError as e:
        print(json.dumps(e.to_payload()), file=sys.stderr)
        return 2
    except ScrapeFailedError as e:
        print(json.dumps(e.to_payload()), file=sys.stderr)
        return 1
    except ValueError as e:
        # unknown profile key
        print(f"Error: {e}", file=sys.stderr)
        return 2

    document = json.dumps(data, indent=2, ensure_ascii=False)
    if args.output:
        filename = output_filename(store_url) if args.output == "auto" else args.output
        with open(filename, 'w', encoding='utf-8') as f:
            f.write(document)
        logger.info(f"✓ Saved dataset to {filename}")
    else:
        print(document)
    return 0


if __name__ == "__main__":
    sys.exit(main())
