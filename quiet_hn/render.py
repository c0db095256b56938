from __future__ import annotations

import html
from collections.abc import Sequence
from urllib.parse import urlsplit

from quiet_hn.models import DisplayItem

HN_ITEM_URL = "https://news.ycombinator.com/item?id={id}"
SAFE_SCHEMES = ("http", "https")

PAGE_TEMPLATE: str = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Quiet Hacker News</title>
    <style>
        body {{ font-family: sans-serif; max-width: 48rem; margin: 2rem auto; color: #333; }}
        h1 {{ font-size: 1.4rem; }}
        li {{ margin: 0.4rem 0; }}
        a {{ color: #222; text-decoration: none; }}
        a:hover {{ color: #ff6600; }}
        .host {{ color: #888; font-size: 0.8rem; }}
        .comments {{ color: #aaa; font-size: 0.8rem; margin-left: 0.4rem; }}
        footer {{ margin-top: 2rem; color: #999; font-size: 0.75rem; }}
    </style>
</head>
<body>
    <h1>Quiet Hacker News</h1>
    <ol>
{stories_html}
    </ol>
    <footer>This page was rendered in {elapsed}</footer>
</body>
</html>
"""

STORY_TEMPLATE: str = (
    '        <li><a href="{url}">{title}</a>'
    ' <span class="host">({host})</span>'
    '<a class="comments" href="{hn_url}">comments</a></li>'
)


def format_elapsed(seconds: float) -> str:
    if seconds < 0.001:
        return f"{seconds * 1_000_000:.0f}µs"
    if seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    return f"{seconds:.2f}s"


def safe_href(url: str) -> str:
    """Escaped link target, or "#" for anything but http(s)."""
    try:
        scheme = urlsplit(url).scheme.lower()
    except ValueError:
        return "#"
    if scheme not in SAFE_SCHEMES:
        return "#"
    return html.escape(url)


def render_story(story: DisplayItem) -> str:
    return STORY_TEMPLATE.format(
        url=safe_href(story.url),
        title=html.escape(story.title or "Untitled", quote=False),
        host=html.escape(story.host, quote=False),
        hn_url=HN_ITEM_URL.format(id=story.id),
    )


def render_page(stories: Sequence[DisplayItem], elapsed: float) -> str:
    """Render the full story list page."""
    return PAGE_TEMPLATE.format(
        stories_html="\n".join(render_story(s) for s in stories),
        elapsed=format_elapsed(elapsed),
    )
