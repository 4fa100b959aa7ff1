from datetime import timedelta

import pytest
import responses
from responses import matchers

from screentime_wrapped.config import (
    GenerationSettings,
    ModelEndpoint,
    SourceSettings,
    WrappedSettings,
)
from tests.util import SCREENPIPE_URL


@pytest.fixture
def requests_mock():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def models():
    return tuple(
        ModelEndpoint(name=f"model-{i}", url=f"https://llm.test/model-{i}:generateContent")
        for i in range(1, 4)
    )


@pytest.fixture
def settings(models):
    return WrappedSettings(
        source=SourceSettings(base_url=SCREENPIPE_URL, record_limit=50, timeout=timedelta(seconds=1)),
        generation=GenerationSettings(models=models, timeout=timedelta(seconds=1)),
    )


@pytest.fixture
def mock_screenpipe(requests_mock):
    """Register health and search responses for the fake Screenpipe daemon."""

    def register(ui=None, ocr=None, healthy=True, ui_status=200, ocr_status=200, limit=50):
        requests_mock.add(
            responses.GET,
            f"{SCREENPIPE_URL}/health",
            json={"status": "healthy"},
            status=200 if healthy else 503,
        )
        for kind, items, status in (("ui", ui, ui_status), ("ocr", ocr, ocr_status)):
            requests_mock.add(
                responses.GET,
                f"{SCREENPIPE_URL}/search",
                json={"data": items or []} if status == 200 else {"error": "boom"},
                status=status,
                match=[matchers.query_param_matcher({"content_type": kind, "limit": str(limit)})],
            )
        return requests_mock

    return register
