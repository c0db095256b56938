from __future__ import annotations

from urllib.parse import urlsplit

from quiet_hn.constants import WWW_PREFIX


def extract_host(url: str) -> str:
    """Lowercase host name of ``url`` without a leading ``www.``, or ``""``."""
    if not url:
        return ""
    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        return ""
    if not hostname:
        return ""
    return hostname.removeprefix(WWW_PREFIX)
