"""Error types raised across the screen time pipeline."""

from __future__ import annotations


class SourceUnavailable(Exception):
    """The capture daemon could not be reached or returned an unusable reply."""

    def __init__(self, content_type: str, reason: str) -> None:
        super().__init__(f"{content_type}: {reason}")
        self.content_type = content_type
        self.reason = reason


class NoUsableRecords(Exception):
    pass


class GenerationFailed(Exception):
    pass
