"""Domain models for capture records, usage tables and slides."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Literal, Mapping, Optional

ContentType = Literal["ui", "ocr"]


def _unwrap(envelope: Mapping[str, Any]) -> Mapping[str, Any]:
    content = envelope.get("content")
    if isinstance(content, Mapping):
        return content
    return envelope


def _text_field(content: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = content.get(key)
        if isinstance(value, str):
            return value
    return None


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


@dataclass(frozen=True, slots=True)
class UiRecord:
    """One second of focus on a window, as reported by the capture daemon."""

    window_name: Optional[str]
    app_name: Optional[str] = None
    timestamp: Optional[datetime] = None

    @classmethod
    def from_payload(cls, envelope: Mapping[str, Any]) -> "UiRecord":
        content = _unwrap(envelope)
        return cls(
            window_name=_text_field(content, "window_name", "windowName"),
            app_name=_text_field(content, "app_name", "appName"),
            timestamp=_parse_timestamp(content.get("timestamp")),
        )


@dataclass(frozen=True, slots=True)
class OcrRecord:
    """A text snapshot of the screen with optional app and window metadata."""

    app_name: Optional[str] = None
    window_name: Optional[str] = None
    text: Optional[str] = None
    timestamp: Optional[datetime] = None

    @classmethod
    def from_payload(cls, envelope: Mapping[str, Any]) -> "OcrRecord":
        content = _unwrap(envelope)
        return cls(
            app_name=_text_field(content, "app_name", "appName"),
            window_name=_text_field(content, "window_name", "windowName"),
            text=_text_field(content, "text"),
            timestamp=_parse_timestamp(content.get("timestamp")),
        )


@dataclass(frozen=True, slots=True)
class UsageEntry:
    """Time and session/visit count for a single app or website."""

    name: str
    time_spent: int
    count: int

    def to_payload(self, count_label: str) -> dict[str, Any]:
        return {"name": self.name, "timeSpent": self.time_spent, count_label: self.count}


UsageTable = tuple[UsageEntry, ...]


class SlideKind(str, Enum):
    TEXT = "text"
    APP_USAGE = "appUsage"
    WEBSITE_USAGE = "websiteUsage"
    INSIGHT = "insight"

    @classmethod
    def parse(cls, value: Any) -> "SlideKind":
        try:
            return cls(value)
        except ValueError:
            return cls.TEXT


@dataclass(frozen=True, slots=True)
class Slide:
    title: str
    content: str
    kind: SlideKind = SlideKind.TEXT
    data: Optional[UsageTable] = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "title": self.title,
            "content": self.content,
            "type": self.kind.value,
        }
        if self.data is not None:
            label = "visits" if self.kind is SlideKind.WEBSITE_USAGE else "sessions"
            payload["data"] = [entry.to_payload(label) for entry in self.data]
        return payload


@dataclass(frozen=True, slots=True)
class ScreenTimeData:
    """Aggregated usage and text corpus handed to the narrative request."""

    app_usage: UsageTable
    website_usage: UsageTable
    text_content: str
    raw_ui_records: tuple[UiRecord, ...] = ()
    raw_ocr_records: tuple[OcrRecord, ...] = ()
    warnings: tuple[str, ...] = field(default_factory=tuple)
    used_demo_data: bool = False
