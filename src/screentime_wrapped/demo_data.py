"""Fixed demonstration dataset used when no real capture data is available."""

from __future__ import annotations

from .models import ScreenTimeData, UsageEntry, UsageTable

DEMO_APP_USAGE: UsageTable = (
    UsageEntry(name="VS Code", time_spent=7200, count=5),
    UsageEntry(name="Chrome", time_spent=5400, count=12),
    UsageEntry(name="Slack", time_spent=3600, count=8),
    UsageEntry(name="Spotify", time_spent=2700, count=3),
    UsageEntry(name="Terminal", time_spent=1800, count=10),
)

DEMO_WEBSITE_USAGE: UsageTable = (
    UsageEntry(name="github.com", time_spent=3600, count=15),
    UsageEntry(name="stackoverflow.com", time_spent=2700, count=8),
    UsageEntry(name="docs.microsoft.com", time_spent=1800, count=6),
    UsageEntry(name="youtube.com", time_spent=1500, count=4),
    UsageEntry(name="chat.openai.com", time_spent=1200, count=5),
)

PLACEHOLDER_TEXT = "This is mock text content for your screen time wrapped presentation."


def demo_screen_time(warnings: tuple[str, ...] = ()) -> ScreenTimeData:
    return ScreenTimeData(
        app_usage=DEMO_APP_USAGE,
        website_usage=DEMO_WEBSITE_USAGE,
        text_content=PLACEHOLDER_TEXT,
        warnings=warnings,
        used_demo_data=True,
    )
