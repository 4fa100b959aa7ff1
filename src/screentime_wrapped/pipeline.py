"""Fetch, aggregate and narrate: the stages behind a screen time presentation."""

from __future__ import annotations

import logging
from typing import Optional

from .aggregation import aggregate, extract_text
from .config import WrappedSettings
from .demo_data import demo_screen_time
from .exceptions import NoUsableRecords
from .models import ScreenTimeData
from .narrative import NarrativeRequester
from .presentation import PresentationState
from .screenpipe import FetchResult, ScreenpipeClient, fetch_records

logger = logging.getLogger(__name__)


class WrappedPipeline:
    """Runs the presentation stages with a shared configuration.

    ``fetch`` talks to the capture daemon; ``summarize`` and ``generate``
    work from a FetchResult, so a failed generation can be retried without
    fetching again.
    """

    def __init__(
        self,
        settings: Optional[WrappedSettings] = None,
        *,
        client: Optional[ScreenpipeClient] = None,
        requester: Optional[NarrativeRequester] = None,
    ) -> None:
        self.settings = settings or WrappedSettings()
        self.client = client or ScreenpipeClient(self.settings.source)
        self.requester = requester or NarrativeRequester(self.settings.generation)

    def fetch(self) -> FetchResult:
        if not self.client.is_available():
            logger.warning(
                "Screenpipe is not reachable at %s; using demo data.", self.client.base_url
            )
            return FetchResult(
                warnings=[f"Screenpipe not available at {self.client.base_url}"],
                source_available=False,
            )
        return fetch_records(self.client, self.settings.source.record_limit)

    def summarize(self, result: FetchResult) -> ScreenTimeData:
        try:
            result.require_records()
        except NoUsableRecords as exc:
            logger.warning("%s Using demo data.", exc)
            return demo_screen_time(tuple(result.warnings))

        aggregation = self.settings.aggregation
        if result.ui_records:
            app_usage, website_usage = aggregate(result.ui_records, "ui", aggregation)
        else:
            logger.info("No UI records; aggregating usage from OCR records.")
            app_usage, website_usage = aggregate(result.ocr_records, "ocr", aggregation)
        return ScreenTimeData(
            app_usage=app_usage,
            website_usage=website_usage,
            text_content=extract_text(result.ocr_records, aggregation),
            raw_ui_records=tuple(result.ui_records),
            raw_ocr_records=tuple(result.ocr_records),
            warnings=tuple(result.warnings),
        )

    def generate(self, result: FetchResult, credential: str) -> PresentationState:
        """Build a fresh presentation from already fetched records.

        Raises GenerationFailed; calling this again is the retry.
        """
        data = self.summarize(result)
        slides = self.requester.generate(
            data.app_usage, data.website_usage, data.text_content, credential
        )
        return PresentationState.start(slides)
