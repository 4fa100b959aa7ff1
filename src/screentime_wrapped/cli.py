"""Command-line interface for Screen Time Wrapped."""

from __future__ import annotations

import logging
from typing import Optional

import typer

from .config import DEFAULT_SCREENPIPE_URL, WrappedSettings
from .credentials import load_api_key, save_api_key
from .exceptions import GenerationFailed, SourceUnavailable
from .server_runner import run_dashboard

app = typer.Typer(help="Turn your Screenpipe history into a Screen Time Wrapped slideshow.")


@app.callback(no_args_is_help=True)
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logs.")) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _settings(url: str, limit: int) -> WrappedSettings:
    return WrappedSettings.from_options(screenpipe_url=url, record_limit=limit)


@app.command()
def summary(
    url: str = typer.Option(
        DEFAULT_SCREENPIPE_URL, "--url", help="Base URL of the Screenpipe daemon."
    ),
    limit: int = typer.Option(
        1000, "--limit", min=1, help="Maximum records to fetch per kind."
    ),
) -> None:
    """Print the top apps and websites from recent capture data."""
    from .pipeline import WrappedPipeline
    from .reporting import SummaryPrinter

    pipeline = WrappedPipeline(_settings(url, limit))
    data = pipeline.summarize(pipeline.fetch())
    SummaryPrinter().print_screen_time(data)


@app.command()
def ocr(
    url: str = typer.Option(
        DEFAULT_SCREENPIPE_URL, "--url", help="Base URL of the Screenpipe daemon."
    ),
    limit: int = typer.Option(
        5, "--limit", min=1, max=20, help="Number of OCR records to show."
    ),
) -> None:
    """Show the latest OCR records captured by Screenpipe."""
    from .reporting import SummaryPrinter
    from .screenpipe import ScreenpipeClient

    client = ScreenpipeClient(_settings(url, limit).source)
    try:
        records = client.fetch_ocr(limit)
    except SourceUnavailable as exc:
        typer.echo(f"Failed to fetch OCR data: {exc.reason}", err=True)
        raise typer.Exit(code=1) from exc
    SummaryPrinter().print_ocr_records(records)


@app.command("set-key")
def set_key(
    api_key: str = typer.Argument(..., help="Gemini API key to store locally."),
) -> None:
    """Store the Gemini API key for later runs."""
    try:
        path = save_api_key(api_key)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    typer.echo(f"API key saved to {path}")


@app.command()
def present(
    api_key: Optional[str] = typer.Option(
        None,
        "--api-key",
        envvar="GEMINI_API_KEY",
        help="Gemini API key (defaults to the stored key).",
    ),
    url: str = typer.Option(
        DEFAULT_SCREENPIPE_URL, "--url", help="Base URL of the Screenpipe daemon."
    ),
    limit: int = typer.Option(
        1000, "--limit", min=1, help="Maximum records to fetch per kind."
    ),
) -> None:
    """Generate the presentation and step through it in the terminal."""
    from .pipeline import WrappedPipeline
    from .reporting import SummaryPrinter

    credential = api_key or load_api_key()
    if not credential:
        typer.echo("No Gemini API key found. Run `screentime-wrapped set-key KEY` first.", err=True)
        raise typer.Exit(code=1)

    pipeline = WrappedPipeline(_settings(url, limit))
    records = pipeline.fetch()
    while True:
        try:
            state = pipeline.generate(records, credential)
            break
        except GenerationFailed as exc:
            typer.echo(f"Failed to generate presentation: {exc}", err=True)
            if not typer.confirm("Try again?", default=True):
                raise typer.Exit(code=1) from exc
            if records.fetch_failed:
                records = pipeline.fetch()

    printer = SummaryPrinter()
    while True:
        printer.print_slide(state)
        choice = typer.prompt("[n]ext, [p]revious, [q]uit", default="n").strip().lower()
        if choice.startswith("q"):
            break
        if choice.startswith("p"):
            state = state.previous()
        else:
            state = state.next()


@app.command()
def web(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind the dashboard."),
    port: int = typer.Option(
        8766, "--port", min=1, max=65535, help="TCP port for the dashboard."
    ),
    url: str = typer.Option(
        DEFAULT_SCREENPIPE_URL, "--url", help="Base URL of the Screenpipe daemon."
    ),
    limit: int = typer.Option(
        1000, "--limit", min=1, help="Maximum records to fetch per kind."
    ),
    open_browser: bool = typer.Option(
        True,
        "--open-browser/--no-open-browser",
        help="Automatically launch the dashboard in your default browser.",
    ),
) -> None:
    """Start the local dashboard."""
    run_dashboard(
        host=host,
        port=port,
        settings=_settings(url, limit),
        open_browser=open_browser,
    )
