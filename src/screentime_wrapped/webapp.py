"""FastAPI application that serves the local Screen Time Wrapped dashboard."""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict

from .config import WrappedSettings
from .exceptions import GenerationFailed, SourceUnavailable
from .models import ScreenTimeData
from .pipeline import WrappedPipeline
from .presentation import PresentationState
from .screenpipe import FetchResult

logger = logging.getLogger(__name__)


class SessionStore:
    """Holds the last fetched records and the current presentation."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: Optional[FetchResult] = None
        self._presentation: Optional[PresentationState] = None

    def records(self, fetch: Callable[[], FetchResult], refresh: bool = False) -> FetchResult:
        """Return cached records, fetching again when asked or when the last fetch failed.

        The fetch itself runs without the lock so navigation is never stuck
        behind slow network calls.
        """
        with self._lock:
            cached = self._records
        if cached is not None and not refresh and not cached.fetch_failed:
            return cached
        fetched = fetch()
        with self._lock:
            self._records = fetched
        return fetched

    def presentation(self) -> Optional[PresentationState]:
        with self._lock:
            return self._presentation

    def set_presentation(self, state: PresentationState) -> None:
        with self._lock:
            self._presentation = state

    def move(self, step: Callable[[PresentationState], PresentationState]) -> Optional[PresentationState]:
        with self._lock:
            if self._presentation is None:
                return None
            self._presentation = step(self._presentation)
            return self._presentation


class GenerateRequest(BaseModel):
    refresh: bool = False

    model_config = ConfigDict(extra="forbid")


def create_app(
    *,
    settings: Optional[WrappedSettings] = None,
    pipeline: Optional[WrappedPipeline] = None,
) -> FastAPI:
    """Instantiate the FastAPI application."""
    resolved_settings = settings or WrappedSettings()
    resolved_pipeline = pipeline or WrappedPipeline(resolved_settings)
    store = SessionStore()

    app = FastAPI(title="Screen Time Wrapped", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.pipeline = resolved_pipeline
    app.state.session_store = store

    static_dir = Path(__file__).parent / "static"
    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.on_event("startup")
    async def _startup() -> None:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )

    @app.get("/api/status")
    def status(request: Request) -> Dict[str, Any]:
        pipeline: WrappedPipeline = request.app.state.pipeline
        return {
            "screenpipe_available": pipeline.client.is_available(),
            "screenpipe_url": pipeline.client.base_url,
            "record_limit": pipeline.settings.source.record_limit,
        }

    @app.get("/api/screen-time")
    def screen_time(
        request: Request,
        refresh: bool = Query(
            default=False,
            description="Fetch records again instead of reusing the last fetch.",
        ),
    ) -> Dict[str, Any]:
        pipeline: WrappedPipeline = request.app.state.pipeline
        records = request.app.state.session_store.records(pipeline.fetch, refresh=refresh)
        return _screen_time_payload(pipeline.summarize(records))

    @app.get("/api/ocr")
    def ocr(
        request: Request,
        limit: int = Query(default=5, ge=1, le=20, description="Number of OCR records."),
    ) -> Dict[str, Any]:
        pipeline: WrappedPipeline = request.app.state.pipeline
        try:
            records = pipeline.client.fetch_ocr(limit)
        except SourceUnavailable as exc:
            raise HTTPException(
                status_code=502, detail=f"Failed to fetch OCR data: {exc.reason}"
            ) from exc
        return {
            "records": [
                {
                    "app_name": record.app_name,
                    "window_name": record.window_name,
                    "timestamp": record.timestamp.isoformat() if record.timestamp else None,
                    "text": record.text,
                }
                for record in records
            ]
        }

    @app.post("/api/presentation")
    def generate_presentation(
        request: Request,
        payload: Optional[GenerateRequest] = None,
        x_goog_api_key: Optional[str] = Header(default=None),
    ) -> Dict[str, Any]:
        if not x_goog_api_key or not x_goog_api_key.strip():
            raise HTTPException(status_code=401, detail="Gemini API key is required")
        pipeline: WrappedPipeline = request.app.state.pipeline
        session_store: SessionStore = request.app.state.session_store
        refresh = payload.refresh if payload else False
        records = session_store.records(pipeline.fetch, refresh=refresh)
        try:
            state = pipeline.generate(records, x_goog_api_key)
        except GenerationFailed as exc:
            logger.warning("Presentation generation failed: %s", exc)
            raise HTTPException(
                status_code=502, detail=f"Failed to generate presentation: {exc}"
            ) from exc
        session_store.set_presentation(state)
        return state.to_payload()

    @app.get("/api/presentation")
    def current_presentation(request: Request) -> Dict[str, Any]:
        return _presentation_payload(request.app.state.session_store.presentation())

    @app.post("/api/presentation/next")
    def next_slide(request: Request) -> Dict[str, Any]:
        return _presentation_payload(
            request.app.state.session_store.move(PresentationState.next)
        )

    @app.post("/api/presentation/previous")
    def previous_slide(request: Request) -> Dict[str, Any]:
        return _presentation_payload(
            request.app.state.session_store.move(PresentationState.previous)
        )

    @app.get("/")
    def index(request: Request):
        index_path = (Path(__file__).parent / "static" / "index.html").resolve()
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="UI not found")
        return FileResponse(index_path)

    return app


def _presentation_payload(state: Optional[PresentationState]) -> Dict[str, Any]:
    if state is None:
        raise HTTPException(status_code=404, detail="No presentation generated yet")
    return state.to_payload()


def _screen_time_payload(data: ScreenTimeData) -> Dict[str, Any]:
    return {
        "app_usage": [entry.to_payload("sessions") for entry in data.app_usage],
        "website_usage": [entry.to_payload("visits") for entry in data.website_usage],
        "text_length": len(data.text_content),
        "record_counts": {
            "ui": len(data.raw_ui_records),
            "ocr": len(data.raw_ocr_records),
        },
        "warnings": list(data.warnings),
        "used_demo_data": data.used_demo_data,
    }
