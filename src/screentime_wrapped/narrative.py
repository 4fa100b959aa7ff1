"""Ask the Gemini API for a slideshow narrative about the user's screen time."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

import requests

from .config import GenerationSettings, ModelEndpoint
from .exceptions import GenerationFailed
from .models import Slide, SlideKind, UsageTable
from .reporting import usage_lines

logger = logging.getLogger(__name__)

_JSON_OBJECT_PATTERN = re.compile(r"\{.*\}", re.DOTALL)

PROMPT_TEMPLATE = """\
You are creating a "Spotify Wrapped"-style presentation about someone's screen time usage.

Here's data about their screen usage in the last 24 hours:

TOP APPS:
{app_usage}

TOP WEBSITES:
{website_usage}

SAMPLE TEXT FROM SCREEN:
{text_sample}

Create a witty, engaging presentation with 7 slides:
1. An introduction slide welcoming them to their Screen Time Wrapped
2. A slide about their top apps with interesting observations
3. A slide about their web browsing habits with interesting observations
4. A slide with a surprising or interesting insight about their screen usage
5. A slide with a personalized "digital personality" assessment based on their usage
6. A slide with a fun prediction or recommendation based on their habits
7. A closing slide thanking them for viewing their Screen Time Wrapped

For each slide, provide:
- A catchy title (max 10 words)
- Engaging content (max 100 words)

Be witty, conversational, and slightly humorous. Use emojis occasionally.
Format your response as JSON with this structure:
{{
  "slides": [
    {{
      "title": "slide title",
      "content": "slide content",
      "type": "text"
    }}
  ]
}}
"""


def build_prompt(
    app_usage: UsageTable,
    website_usage: UsageTable,
    text_corpus: str,
    text_sample_chars: int = 5000,
) -> str:
    return PROMPT_TEMPLATE.format(
        app_usage="\n".join(usage_lines(app_usage, "sessions")),
        website_usage="\n".join(usage_lines(website_usage, "visits")),
        text_sample=text_corpus[:text_sample_chars],
    )


def parse_slides(
    response_text: str, app_usage: UsageTable, website_usage: UsageTable
) -> list[Slide]:
    """Extract the slide list from a model reply that may wrap JSON in prose.

    Slides 2 and 3 always carry the app and website tables, whatever kind the
    model assigned them.
    """
    match = _JSON_OBJECT_PATTERN.search(response_text)
    if not match:
        raise GenerationFailed("Could not find JSON in the model response")
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise GenerationFailed(f"Could not parse JSON from the model response: {exc}") from exc

    raw_slides = payload.get("slides") if isinstance(payload, dict) else None
    if not isinstance(raw_slides, list) or not raw_slides:
        raise GenerationFailed("Model response did not contain any slides")

    slides: list[Slide] = []
    for index, raw in enumerate(raw_slides):
        if not isinstance(raw, dict):
            raise GenerationFailed(f"Slide {index + 1} is not an object")
        title = str(raw.get("title") or "")
        content = str(raw.get("content") or "")
        if index == 1:
            slides.append(Slide(title, content, SlideKind.APP_USAGE, app_usage))
        elif index == 2:
            slides.append(Slide(title, content, SlideKind.WEBSITE_USAGE, website_usage))
        else:
            slides.append(Slide(title, content, SlideKind.parse(raw.get("type"))))
    return slides


class NarrativeRequester:
    """Calls the configured models in order until one of them answers."""

    def __init__(self, settings: Optional[GenerationSettings] = None) -> None:
        self.settings = settings or GenerationSettings()

    def generate(
        self,
        app_usage: UsageTable,
        website_usage: UsageTable,
        text_corpus: str,
        credential: str,
    ) -> list[Slide]:
        if not credential or not credential.strip():
            raise GenerationFailed("Gemini API key not found")
        prompt = build_prompt(
            app_usage, website_usage, text_corpus, self.settings.text_sample_chars
        )
        response_text = self.request_text(prompt, credential.strip())
        slides = parse_slides(response_text, app_usage, website_usage)
        logger.info("Generated %d slides.", len(slides))
        return slides

    def request_text(self, prompt: str, credential: str) -> str:
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": self.settings.generation_config(),
        }
        errors: list[str] = []
        for model in self.settings.models:
            log = logger.getChild(model.name)
            log.debug("Trying model %s", model.name)
            try:
                response = requests.post(
                    model.url,
                    headers={
                        "Content-Type": "application/json",
                        "x-goog-api-key": credential,
                    },
                    json=body,
                    timeout=self.settings.timeout.total_seconds(),
                )
            except requests.RequestException as exc:
                errors.append(f"{model.name}: {exc}")
                log.warning("Request to %s failed: %s", model.name, exc)
                continue

            if response.ok:
                log.info("Using model %s", model.name)
                return _response_text(model, response)

            reason = _error_reason(response)
            errors.append(f"{model.name}: {reason}")
            log.warning("Model %s failed: %s", model.name, reason)

        raise GenerationFailed("All Gemini API models failed. " + "; ".join(errors))


def _response_text(model: ModelEndpoint, response: requests.Response) -> str:
    try:
        payload = response.json()
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (ValueError, KeyError, IndexError, TypeError) as exc:
        raise GenerationFailed(f"No response text from {model.name}") from exc
    if not isinstance(text, str) or not text:
        raise GenerationFailed(f"No response text from {model.name}")
    return text


def _error_reason(response: requests.Response) -> str:
    try:
        payload: Any = response.json()
        message = payload["error"]["message"]
    except (ValueError, KeyError, TypeError):
        message = None
    if isinstance(message, str) and message:
        return message
    return response.reason or f"HTTP {response.status_code}"
