"""Utilities to derive app names and websites from window titles and text."""

from __future__ import annotations

import re
from typing import Iterator, Optional

TITLE_SEPARATOR = " - "

_BROWSER_NAMES: tuple[str, ...] = (
    "Google Chrome",
    "Mozilla Firefox",
    "Microsoft Edge",
    "Safari",
    "Opera",
    "Brave",
)

_WEBSITE_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(rf"(\S+\.\S+){re.escape(TITLE_SEPARATOR + browser)}")
    for browser in _BROWSER_NAMES
)

_URL_PATTERN = re.compile(r"https?://([A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)+)")

_EXTRA_TAB_COUNT_PATTERN = re.compile(r"\s+and\s+\d+\s+more\s+pages?", re.IGNORECASE)


def app_name_from_window_title(window_title: Optional[str]) -> Optional[str]:
    """Return the part of a window title before the first separator."""
    if not window_title:
        return None
    head = window_title.split(TITLE_SEPARATOR, 1)[0].strip()
    return head or None


def extract_website_name(window_title: Optional[str]) -> Optional[str]:
    """Return the domain from a ``<domain> - <Browser>`` style title."""
    if not window_title or TITLE_SEPARATOR not in window_title:
        return None
    normalized = _strip_tab_count(window_title)
    normalized = re.sub(r"\s{2,}", " ", normalized)
    for pattern in _WEBSITE_PATTERNS:
        match = pattern.search(normalized)
        if match:
            return match.group(1)
    return None


def iter_url_hostnames(text: Optional[str]) -> Iterator[str]:
    """Yield the lower-cased hostname of every http(s) URL in ``text``."""
    if not text:
        return
    for match in _URL_PATTERN.finditer(text):
        yield match.group(1).lower()


def _strip_tab_count(value: str) -> str:
    return _EXTRA_TAB_COUNT_PATTERN.sub("", value)
