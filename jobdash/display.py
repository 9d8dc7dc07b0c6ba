"""Small HTML helpers for the Streamlit pages."""
from __future__ import annotations

import html
from urllib.parse import urlsplit


def chips_html(items: list[str]) -> str:
    """Pill markup for analysis values; every value is HTML-escaped."""
    return "".join(f'<span class="chip">{html.escape(item)}</span>' for item in items)


def site_label(url: str) -> str:
    host = urlsplit(url).netloc
    return host[4:] if host.startswith("www.") else host
