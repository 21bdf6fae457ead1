from markup_extractor import MarkupExtractor
from text_heuristics import (
    EMAIL_RE,
    PHONE_RE,
    contact_from_link,
    find_address_block,
    find_social_links,
    normalize_social_url,
    summarize,
)


def test_single_facebook_link_only():
    html = '<footer><a href="https://www.facebook.com/mystore">Follow us</a></footer>'
    assert find_social_links(html) == {"facebook": "https://www.facebook.com/mystore"}


def test_social_links_without_scheme_are_normalized():
    html = """
    <a href="//instagram.com/mystore">IG</a>
    <p>pinterest.com/mystore</p>
    <a href='https://www.tiktok.com/@mystore'>TikTok</a>
    <a href="https://www.tiktok.com/discover">not a profile</a>
    """
    links = find_social_links(html)
    assert links == {
        "instagram": "https://instagram.com/mystore",
        "pinterest": "https://pinterest.com/mystore",
        "tiktok": "https://www.tiktok.com/@mystore",
    }


def test_first_match_per_platform_wins():
    html = '<a href="https://twitter.com/first">a</a><a href="https://twitter.com/second">b</a>'
    assert find_social_links(html)["twitter"] == "https://twitter.com/first"


def test_no_social_links():
    assert find_social_links("<html><body>Hello</body></html>") == {}
    assert find_social_links("") == {}


def test_normalize_social_url():
    assert normalize_social_url("youtube.com/c/shop") == "https://youtube.com/c/shop"
    assert normalize_social_url("http://youtube.com/c/shop") == "http://youtube.com/c/shop"


def test_email_pattern():
    page = MarkupExtractor("<p>Write to support@shop.example.com today</p>")
    assert page.first_regex(EMAIL_RE) == "support@shop.example.com"
    assert MarkupExtractor("<p>no address here</p>").first_regex(EMAIL_RE) == ""


def test_phone_pattern():
    assert MarkupExtractor("<p>Call us: 555-123-4567</p>").first_regex(PHONE_RE) == "555-123-4567"
    assert MarkupExtractor("<p>nothing</p>").first_regex(PHONE_RE) == ""


def test_contact_from_link():
    assert contact_from_link("mailto:hi@shop.test?subject=Hello", "mailto:") == "hi@shop.test"
    assert contact_from_link("tel:+15551234567", "tel:") == "+15551234567"
    assert contact_from_link("/pages/contact", "tel:") == ""


def test_contact_from_link_decodes_and_validates():
    assert contact_from_link("mailto:%20hi@x.com", "mailto:", EMAIL_RE) == "hi@x.com"
    assert contact_from_link("mailto:hi%40x.com", "mailto:", EMAIL_RE) == "hi@x.com"
    assert contact_from_link("mailto:not-an-address", "mailto:", EMAIL_RE) == ""
    assert contact_from_link("mailto:", "mailto:", EMAIL_RE) == ""


def test_address_window_around_us_zip():
    text = "x" * 300 + " CA 90210 " + "y" * 300
    block = find_address_block(text)
    assert "CA 90210" in block
    assert len(block) == 200


def test_address_canadian_postal_code():
    block = find_address_block("Shop, 100 Queen St W, Toronto ON M5H 2N2 Canada")
    assert "M5H 2N2" in block
    assert block.startswith("Shop")


def test_address_not_found():
    assert find_address_block("Free shipping on all orders") == ""
    assert find_address_block("") == ""


def test_summarize_truncates_and_marks():
    text = "a" * 250
    assert summarize(f"  {text}  ") == "a" * 200 + "..."
    assert summarize("short") == "short..."
