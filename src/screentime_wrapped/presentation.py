"""Slide navigation state for a generated presentation."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Sequence

from .models import Slide


@dataclass(frozen=True, slots=True)
class PresentationState:
    """An ordered, non-empty slide list and a cursor that never wraps.

    Transitions return a new state; the cursor saturates at either end.
    """

    slides: tuple[Slide, ...]
    cursor: int = 0

    def __post_init__(self) -> None:
        if not self.slides:
            raise ValueError("A presentation needs at least one slide")
        if not 0 <= self.cursor < len(self.slides):
            raise ValueError(f"Cursor {self.cursor} out of range for {len(self.slides)} slides")

    @classmethod
    def start(cls, slides: Sequence[Slide]) -> "PresentationState":
        return cls(slides=tuple(slides))

    @property
    def current(self) -> Slide:
        return self.slides[self.cursor]

    @property
    def is_first(self) -> bool:
        return self.cursor == 0

    @property
    def is_last(self) -> bool:
        return self.cursor == len(self.slides) - 1

    @property
    def position(self) -> str:
        return f"{self.cursor + 1} / {len(self.slides)}"

    def next(self) -> "PresentationState":
        if self.is_last:
            return self
        return replace(self, cursor=self.cursor + 1)

    def previous(self) -> "PresentationState":
        if self.is_first:
            return self
        return replace(self, cursor=self.cursor - 1)

    def to_payload(self) -> dict[str, Any]:
        return {
            "cursor": self.cursor,
            "total": len(self.slides),
            "is_first": self.is_first,
            "is_last": self.is_last,
            "slide": self.current.to_payload(),
            "slides": [slide.to_payload() for slide in self.slides],
        }
