"""Simple reporting utilities for CLI output and prompt text."""

from __future__ import annotations

from typing import Iterable

from .models import OcrRecord, ScreenTimeData, Slide, SlideKind, UsageEntry
from .presentation import PresentationState


def format_duration(seconds: float) -> str:
    total_seconds = int(seconds)
    hours, remainder = divmod(total_seconds, 3600)
    minutes = remainder // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def usage_lines(entries: Iterable[UsageEntry], count_label: str) -> list[str]:
    """Render entries as ``name: 1h 5m (3 sessions)`` lines."""
    return [
        f"{entry.name}: {format_duration(entry.time_spent)} ({entry.count} {count_label})"
        for entry in entries
    ]


class SummaryPrinter:
    """Render human-readable summaries in the console."""

    def print_screen_time(self, data: ScreenTimeData) -> None:
        if data.used_demo_data:
            print("Screenpipe data unavailable; showing demo data.")
        for warning in data.warnings:
            print(f"warning: {warning}")
        print()

        print("Top apps:")
        for entry in data.app_usage:
            print(f"  {entry.name[:30]:<30} {format_duration(entry.time_spent):>8} {entry.count:>5} sessions")
        print()
        print("Top websites:")
        for entry in data.website_usage:
            print(f"  {entry.name[:30]:<30} {format_duration(entry.time_spent):>8} {entry.count:>5} visits")
        print()
        print(f"Captured text: {len(data.text_content)} characters")

    def print_ocr_records(self, records: Iterable[OcrRecord]) -> None:
        printed = False
        for record in records:
            printed = True
            when = record.timestamp.strftime("%Y-%m-%d %H:%M:%S") if record.timestamp else "unknown time"
            print(f"{record.app_name or 'Unknown App'} - {when}")
            print(f"  Window: {record.window_name or 'Unknown'}")
            print(f"  {(record.text or 'No text content').strip()[:500]}")
            print()
        if not printed:
            print("No OCR data available.")

    def print_slide(self, state: PresentationState) -> None:
        slide: Slide = state.current
        print()
        print(f"[{state.position}] {slide.title}")
        print("-" * 60)
        print(slide.content)
        if slide.data:
            label = "visits" if slide.kind is SlideKind.WEBSITE_USAGE else "sessions"
            print()
            for line in usage_lines(slide.data[:5], label):
                print(f"  {line}")
