import pytest
import responses

from screentime_wrapped.demo_data import DEMO_APP_USAGE, DEMO_WEBSITE_USAGE, PLACEHOLDER_TEXT
from screentime_wrapped.exceptions import GenerationFailed
from screentime_wrapped.models import SlideKind, UsageEntry
from screentime_wrapped.pipeline import WrappedPipeline
from tests.util import ocr_envelope, slides_reply, ui_envelope


@pytest.fixture
def pipeline(settings):
    return WrappedPipeline(settings)


def search_calls(requests_mock):
    return [call for call in requests_mock.calls if "/search" in call.request.url]


def test_unavailable_daemon_skips_queries_and_uses_demo_data(pipeline, mock_screenpipe):
    requests_mock = mock_screenpipe(healthy=False)

    result = pipeline.fetch()
    data = pipeline.summarize(result)

    assert not result.source_available
    assert search_calls(requests_mock) == []
    assert data.used_demo_data
    assert data.app_usage == DEMO_APP_USAGE
    assert data.website_usage == DEMO_WEBSITE_USAGE
    assert data.text_content == PLACEHOLDER_TEXT
    assert data.warnings


def test_ui_records_drive_usage_tables(pipeline, mock_screenpipe):
    mock_screenpipe(
        ui=[
            ui_envelope("Editor - Doc1"),
            ui_envelope("Editor - Doc2"),
            ui_envelope("Browser - example.com - Google Chrome"),
        ],
        ocr=[ocr_envelope(text="Reviewing the quarterly report"), ocr_envelope(app_name="Ignored")],
    )

    data = pipeline.summarize(pipeline.fetch())

    assert not data.used_demo_data
    assert data.app_usage == (
        UsageEntry("Editor", 2, 2),
        UsageEntry("Browser", 1, 1),
    )
    assert data.website_usage == (UsageEntry("example.com", 1, 1),)
    assert data.text_content == "Reviewing the quarterly report"
    assert len(data.raw_ui_records) == 3 and len(data.raw_ocr_records) == 2


def test_ocr_records_used_when_ui_is_missing(pipeline, mock_screenpipe):
    mock_screenpipe(
        ui_status=500,
        ocr=[
            ocr_envelope(text="Reading https://foo.dev docs", app_name="Arc"),
            ocr_envelope(text="more notes here", app_name="Notes"),
        ],
    )

    data = pipeline.summarize(pipeline.fetch())

    assert data.app_usage == (UsageEntry("Arc", 5, 1), UsageEntry("Notes", 5, 1))
    assert data.website_usage == (UsageEntry("foo.dev", 5, 1),)
    assert data.warnings == ("UI records unavailable (HTTP 500 Internal Server Error)",)


def test_retry_after_generation_failure_reuses_records(pipeline, mock_screenpipe, models):
    requests_mock = mock_screenpipe(ui=[ui_envelope("Editor - Doc1")])
    for model in models:
        requests_mock.add(responses.POST, model.url, json={"error": {"message": "overloaded"}}, status=503)
    requests_mock.add(responses.POST, models[0].url, json=slides_reply())

    records = pipeline.fetch()
    with pytest.raises(GenerationFailed):
        pipeline.generate(records, "key")
    state = pipeline.generate(records, "key")

    assert len(search_calls(requests_mock)) == 2
    assert state.cursor == 0
    assert len(state.slides) == 7
    assert state.slides[1].kind is SlideKind.APP_USAGE
    assert state.slides[1].data == (UsageEntry("Editor", 1, 1),)
