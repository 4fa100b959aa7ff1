"""Client for the local Screenpipe capture daemon."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

from .config import SourceSettings
from .exceptions import NoUsableRecords, SourceUnavailable
from .models import ContentType, OcrRecord, UiRecord

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FetchResult:
    """Raw records of both kinds from one fetch cycle."""

    ui_records: list[UiRecord] = field(default_factory=list)
    ocr_records: list[OcrRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    source_available: bool = True

    @property
    def fetch_failed(self) -> bool:
        return not self.source_available or bool(self.warnings)

    def require_records(self) -> None:
        if not self.ui_records and not self.ocr_records:
            raise NoUsableRecords("Screenpipe returned no UI or OCR records.")


class ScreenpipeClient:
    """Thin wrapper around the daemon's health and search endpoints."""

    def __init__(self, settings: Optional[SourceSettings] = None) -> None:
        self.settings = settings or SourceSettings()

    @property
    def base_url(self) -> str:
        return self.settings.base_url.rstrip("/")

    def is_available(self) -> bool:
        url = f"{self.base_url}/health"
        try:
            response = requests.get(url, timeout=self._timeout())
        except requests.RequestException as exc:
            logger.debug("Screenpipe health check failed: %s", exc)
            return False
        if not response.ok:
            logger.debug("Screenpipe health check returned %s", response.status_code)
            return False
        return True

    def query(self, content_type: ContentType, limit: Optional[int] = None) -> list[dict[str, Any]]:
        """Return up to ``limit`` record envelopes of the given kind.

        Raises SourceUnavailable on network errors, non-success statuses and
        payloads that do not carry a ``data`` list.
        """
        limit = limit if limit is not None else self.settings.record_limit
        log = logger.getChild(content_type)
        try:
            response = requests.get(
                f"{self.base_url}/search",
                params={"content_type": content_type, "limit": limit},
                timeout=self._timeout(),
            )
        except requests.RequestException as exc:
            raise SourceUnavailable(content_type, str(exc)) from exc

        if not response.ok:
            raise SourceUnavailable(
                content_type, f"HTTP {response.status_code} {response.reason}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise SourceUnavailable(content_type, "response is not JSON") from exc
        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, list):
            raise SourceUnavailable(content_type, "response has no data list")

        expected_type = content_type.upper()
        envelopes = [
            item
            for item in data
            if isinstance(item, dict)
            and str(item.get("type", expected_type)).upper() == expected_type
        ]
        log.debug("Received %d of %d envelopes", len(envelopes), len(data))
        return envelopes[:limit]

    def fetch_ui(self, limit: Optional[int] = None) -> list[UiRecord]:
        return [UiRecord.from_payload(item) for item in self.query("ui", limit)]

    def fetch_ocr(self, limit: Optional[int] = None) -> list[OcrRecord]:
        return [OcrRecord.from_payload(item) for item in self.query("ocr", limit)]

    def _timeout(self) -> float:
        return self.settings.timeout.total_seconds()


def fetch_records(client: ScreenpipeClient, limit: Optional[int] = None) -> FetchResult:
    """Fetch both record kinds; a failing kind becomes an empty list and a warning."""
    result = FetchResult()
    try:
        result.ui_records = client.fetch_ui(limit)
    except SourceUnavailable as exc:
        logger.warning("Could not fetch UI records: %s", exc.reason)
        result.warnings.append(f"UI records unavailable ({exc.reason})")
    try:
        result.ocr_records = client.fetch_ocr(limit)
    except SourceUnavailable as exc:
        logger.warning("Could not fetch OCR records: %s", exc.reason)
        result.warnings.append(f"OCR records unavailable ({exc.reason})")
    logger.info(
        "Fetched %d UI and %d OCR records.",
        len(result.ui_records),
        len(result.ocr_records),
    )
    return result
