"""Helpers to launch the local web dashboard."""

from __future__ import annotations

import logging
import threading
import time
import webbrowser
from typing import Optional

import uvicorn

from .config import WrappedSettings
from .webapp import create_app

logger = logging.getLogger(__name__)


def run_dashboard(
    *,
    host: str = "127.0.0.1",
    port: int = 8766,
    settings: Optional[WrappedSettings] = None,
    open_browser: bool = True,
    log_level: str = "info",
) -> None:
    """Serve the dashboard with uvicorn until interrupted."""
    settings = settings or WrappedSettings()
    app = create_app(settings=settings)
    url = f"http://{host}:{port}"
    logger.info(
        "Serving dashboard at %s (Screenpipe at %s)", url, settings.source.base_url
    )

    if open_browser:
        threading.Thread(target=_open_when_ready, args=(url,), daemon=True).start()

    logging.getLogger("uvicorn.error").setLevel(log_level.upper())
    uvicorn.run(app, host=host, port=port, log_level=log_level)


def _open_when_ready(url: str, delay: float = 1.0) -> None:
    time.sleep(delay)
    if not webbrowser.open(url):
        logger.warning("No browser available; open %s manually.", url)
