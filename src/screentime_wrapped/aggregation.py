"""Turn raw capture records into ranked usage tables and a text corpus."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, Optional, Sequence, Union

from .config import AggregationSettings
from .demo_data import DEMO_APP_USAGE, DEMO_WEBSITE_USAGE, PLACEHOLDER_TEXT
from .models import ContentType, OcrRecord, UiRecord, UsageEntry, UsageTable
from .normalization import (
    app_name_from_window_title,
    extract_website_name,
    iter_url_hostnames,
)

logger = logging.getLogger(__name__)


class UsageAccumulator:
    """Name-keyed running totals that remember first-seen order."""

    def __init__(self) -> None:
        self._seconds: defaultdict[str, int] = defaultdict(int)
        self._counts: defaultdict[str, int] = defaultdict(int)

    def add(self, name: str, seconds: int, count: int = 1) -> None:
        self._seconds[name] += seconds
        self._counts[name] += count

    def __len__(self) -> int:
        return len(self._seconds)

    def __contains__(self, name: object) -> bool:
        return name in self._seconds

    def to_table(self, top_n: int) -> UsageTable:
        # sorted() is stable, so equal totals keep first-seen order.
        ranked = sorted(self._seconds.items(), key=lambda item: item[1], reverse=True)
        return tuple(
            UsageEntry(name=name, time_spent=seconds, count=self._counts[name])
            for name, seconds in ranked[:top_n]
        )


def aggregate(
    records: Sequence[Union[UiRecord, OcrRecord]],
    kind: ContentType,
    settings: Optional[AggregationSettings] = None,
) -> tuple[UsageTable, UsageTable]:
    """Return ``(app_usage, website_usage)`` for records of the given kind."""
    settings = settings or AggregationSettings()
    if kind == "ui":
        apps, websites = _aggregate_ui(records, settings)  # type: ignore[arg-type]
    elif kind == "ocr":
        apps, websites = _aggregate_ocr(records, settings)  # type: ignore[arg-type]
    else:
        raise ValueError(f"Unknown record kind: {kind!r}")

    app_usage = apps.to_table(settings.top_n)
    website_usage = websites.to_table(settings.top_n)
    if not app_usage:
        logger.info("No app usage found in %d %s records; using demo apps.", len(records), kind)
        app_usage = DEMO_APP_USAGE
    if not website_usage:
        logger.info("No website usage found in %d %s records; using demo websites.", len(records), kind)
        website_usage = DEMO_WEBSITE_USAGE
    return app_usage, website_usage


def _aggregate_ui(
    records: Iterable[UiRecord], settings: AggregationSettings
) -> tuple[UsageAccumulator, UsageAccumulator]:
    apps = UsageAccumulator()
    websites = UsageAccumulator()
    unit = settings.ui_seconds_per_record
    for record in records:
        app_name = app_name_from_window_title(record.window_name)
        if app_name is None:
            continue
        apps.add(app_name, unit)
        website = extract_website_name(record.window_name)
        if website:
            websites.add(website, unit)
    return apps, websites


def _aggregate_ocr(
    records: Sequence[OcrRecord], settings: AggregationSettings
) -> tuple[UsageAccumulator, UsageAccumulator]:
    apps = UsageAccumulator()
    websites = UsageAccumulator()
    unit = settings.ocr_seconds_per_record
    for record in records:
        if record.app_name:
            apps.add(record.app_name, unit)
        website = extract_website_name(record.window_name)
        if website:
            websites.add(website, unit)

    if len(websites) < settings.min_websites_before_url_scan:
        logger.debug(
            "Only %d websites from window titles; scanning OCR text for URLs.",
            len(websites),
        )
        for record in records:
            for hostname in iter_url_hostnames(record.text):
                # A URL never adds to a site that is already in the table.
                if hostname in websites:
                    continue
                websites.add(hostname, unit)
    return apps, websites


def join_text(records: Iterable[OcrRecord]) -> str:
    """Join the non-empty text payloads with single spaces, in record order."""
    return " ".join(record.text for record in records if record.text)


def extract_text(
    records: Iterable[OcrRecord], settings: Optional[AggregationSettings] = None
) -> str:
    """Return the OCR corpus, or placeholder text when it is too short to use."""
    settings = settings or AggregationSettings()
    text = join_text(records)
    if len(text) < settings.min_text_length:
        logger.info("OCR text too short (%d chars); using placeholder text.", len(text))
        return PLACEHOLDER_TEXT
    return text
