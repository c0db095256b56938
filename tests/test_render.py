import pytest

from conftest import story
from quiet_hn.fetching import adapt
from quiet_hn.render import format_elapsed, render_page, safe_href


def test_format_elapsed_units():
    assert format_elapsed(0.0005) == "500µs"
    assert format_elapsed(0.0123) == "12.3ms"
    assert format_elapsed(1.25) == "1.25s"


def test_render_page_lists_stories():
    stories = [adapt(story(1)), adapt(story(2, url="https://news.sub.org/x"))]
    page = render_page(stories, 0.01)
    assert page.startswith("<!DOCTYPE html>")
    assert page.count("<li>") == 2
    assert '<a href="https://www.example.com/1">Story 1</a>' in page
    assert "(news.sub.org)" in page
    assert "news.ycombinator.com/item?id=2" in page
    assert "rendered in 10.0ms" in page


def test_render_page_empty():
    page = render_page([], 0.0)
    assert "<ol>" in page
    assert "<li>" not in page


@pytest.mark.parametrize(
    "url",
    [
        "javascript:alert(document.cookie)",
        "JavaScript:alert(1)",
        "data:text/html,<script>alert(1)</script>",
        "http://[broken",
    ],
)
def test_render_page_neutralizes_unsafe_links(url):
    page = render_page([adapt(story(1, url=url))], 0.01)
    assert '<a href="#">Story 1</a>' in page
    assert 'href="javascript:' not in page.lower()
    assert 'href="data:' not in page


def test_safe_href_keeps_http_links():
    assert safe_href("HTTPS://example.com/a?b=1&c=2") == "HTTPS://example.com/a?b=1&amp;c=2"
    assert safe_href("http://example.com") == "http://example.com"
    assert safe_href("ftp://example.com") == "#"
