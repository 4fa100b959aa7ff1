"""Configuration models and helpers for the screen time wrapped pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

DEFAULT_SCREENPIPE_URL = "http://localhost:3030"
GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"


@dataclass(frozen=True, slots=True)
class ModelEndpoint:
    """A generative model to try, in order of preference."""

    name: str
    url: str


DEFAULT_MODELS: tuple[ModelEndpoint, ...] = (
    ModelEndpoint(
        name="gemini-1.5-pro",
        url=f"{GEMINI_BASE_URL}/v1/models/gemini-1.5-pro:generateContent",
    ),
    ModelEndpoint(
        name="gemini-pro",
        url=f"{GEMINI_BASE_URL}/v1/models/gemini-pro:generateContent",
    ),
    ModelEndpoint(
        name="gemini-pro (beta)",
        url=f"{GEMINI_BASE_URL}/v1beta/models/gemini-pro:generateContent",
    ),
)


@dataclass(slots=True)
class SourceSettings:
    """Where and how much to read from the capture daemon."""

    base_url: str = DEFAULT_SCREENPIPE_URL
    record_limit: int = 1000
    timeout: timedelta = timedelta(seconds=10)


@dataclass(slots=True)
class AggregationSettings:
    """Heuristics used to turn raw records into usage tables.

    A UI record stands for one second of focus; OCR frames are sampled more
    coarsely, so each one is credited with several seconds.
    """

    ui_seconds_per_record: int = 1
    ocr_seconds_per_record: int = 5
    top_n: int = 10
    min_text_length: int = 10
    min_websites_before_url_scan: int = 3


@dataclass(slots=True)
class GenerationSettings:
    """Sampling configuration and model fallbacks for the narrative request."""

    models: tuple[ModelEndpoint, ...] = DEFAULT_MODELS
    temperature: float = 0.7
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 2048
    text_sample_chars: int = 5000
    timeout: timedelta = timedelta(seconds=60)

    def generation_config(self) -> dict[str, float | int]:
        return {
            "temperature": self.temperature,
            "topK": self.top_k,
            "topP": self.top_p,
            "maxOutputTokens": self.max_output_tokens,
        }


@dataclass(slots=True)
class WrappedSettings:
    """Runtime configuration for the whole pipeline."""

    source: SourceSettings = field(default_factory=SourceSettings)
    aggregation: AggregationSettings = field(default_factory=AggregationSettings)
    generation: GenerationSettings = field(default_factory=GenerationSettings)

    @classmethod
    def from_options(
        cls,
        screenpipe_url: Optional[str] = None,
        record_limit: Optional[int] = None,
        source_timeout_seconds: Optional[float] = None,
        generation_timeout_seconds: Optional[float] = None,
    ) -> "WrappedSettings":
        source = SourceSettings()
        if screenpipe_url:
            source.base_url = screenpipe_url.rstrip("/")
        if record_limit is not None:
            source.record_limit = record_limit
        if source_timeout_seconds is not None:
            source.timeout = timedelta(seconds=source_timeout_seconds)
        generation = GenerationSettings()
        if generation_timeout_seconds is not None:
            generation.timeout = timedelta(seconds=generation_timeout_seconds)
        return cls(source=source, generation=generation)
