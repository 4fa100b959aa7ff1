import pytest
import responses
from typer.testing import CliRunner

from screentime_wrapped.cli import app
from screentime_wrapped.config import DEFAULT_MODELS
from tests.util import SCREENPIPE_URL, slides_reply, ui_envelope


@pytest.fixture
def runner():
    return CliRunner()


def test_set_key(runner, mocker, tmp_path):
    save = mocker.patch("screentime_wrapped.cli.save_api_key", return_value=tmp_path / "credentials.json")

    result = runner.invoke(app, ["set-key", "abc"])

    assert result.exit_code == 0
    save.assert_called_once_with("abc")
    assert "API key saved" in result.output


def test_set_key_rejects_blank(runner, tmp_path, mocker):
    mocker.patch("screentime_wrapped.credentials.get_credentials_path", return_value=tmp_path / "c.json")

    result = runner.invoke(app, ["set-key", "  "])

    assert result.exit_code != 0
    assert not (tmp_path / "c.json").exists()


def test_summary_prints_tables(runner, mock_screenpipe):
    mock_screenpipe(ui=[ui_envelope("Editor - Doc1"), ui_envelope("github.com - Google Chrome")])

    result = runner.invoke(app, ["summary", "--url", SCREENPIPE_URL, "--limit", "50"])

    assert result.exit_code == 0
    assert "Top apps:" in result.output
    assert "Editor" in result.output
    assert "github.com" in result.output


def test_summary_falls_back_to_demo_data(runner, mock_screenpipe):
    mock_screenpipe(healthy=False)

    result = runner.invoke(app, ["summary", "--url", SCREENPIPE_URL, "--limit", "50"])

    assert result.exit_code == 0
    assert "showing demo data" in result.output
    assert "VS Code" in result.output


def test_present_without_key(runner, mocker):
    mocker.patch("screentime_wrapped.cli.load_api_key", return_value=None)

    result = runner.invoke(app, ["present"], env={"GEMINI_API_KEY": ""})

    assert result.exit_code == 1


def test_present_steps_through_slides(runner, mock_screenpipe):
    requests_mock = mock_screenpipe(ui=[ui_envelope("Editor - Doc1")])
    requests_mock.add(responses.POST, DEFAULT_MODELS[0].url, json=slides_reply())

    result = runner.invoke(
        app,
        ["present", "--api-key", "secret", "--url", SCREENPIPE_URL, "--limit", "50"],
        input="n\nq\n",
    )

    assert result.exit_code == 0
    assert "[1 / 7] Welcome to your Wrapped" in result.output
    assert "[2 / 7] Apps you loved" in result.output
    assert "Editor: 0m (1 sessions)" in result.output


def test_web_passes_options_to_dashboard(runner, mocker):
    run = mocker.patch("screentime_wrapped.cli.run_dashboard")

    result = runner.invoke(app, ["web", "--port", "9000", "--no-open-browser", "--url", SCREENPIPE_URL])

    assert result.exit_code == 0
    kwargs = run.call_args.kwargs
    assert kwargs["port"] == 9000
    assert kwargs["open_browser"] is False
    assert kwargs["settings"].source.base_url == SCREENPIPE_URL


def test_run_dashboard_starts_uvicorn(mocker):
    from screentime_wrapped.server_runner import run_dashboard

    uvicorn_run = mocker.patch("screentime_wrapped.server_runner.uvicorn.run")

    run_dashboard(port=9001, open_browser=False)

    assert uvicorn_run.call_args.kwargs["port"] == 9001
