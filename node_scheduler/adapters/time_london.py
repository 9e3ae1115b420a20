"""
Site date formatter.

Formats epoch timestamps for log and revision messages in the site's display
timezone (Europe/London unless configured otherwise).

Key behaviors:
- "short" format matches the CMS core short date: 01/31/2026 - 14:05
- DST transitions handled by zoneinfo
- Unknown format names are used as strftime patterns
"""

from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

DEFAULT_FORMATS: dict[str, str] = {
    "short": "%m/%d/%Y - %H:%M",
}


class LondonDateFormatter:
    """
    Date formatter bound to an IANA timezone.

    Handles BST (British Summer Time) / GMT transitions correctly.
    """

    def __init__(
        self,
        tz_name: str = "Europe/London",
        formats: dict[str, str] | None = None,
    ) -> None:
        """
        Initialize with specified timezone.

        Args:
            tz_name: IANA timezone name (default: Europe/London)
            formats: Named strftime patterns, merged over the defaults
        """
        self._tz = ZoneInfo(tz_name)
        self._formats = {**DEFAULT_FORMATS, **(formats or {})}

    def to_local(self, timestamp: int) -> datetime:
        """Convert an epoch timestamp to an aware datetime in the site timezone."""
        return datetime.fromtimestamp(timestamp, UTC).astimezone(self._tz)

    def format(self, timestamp: int, type_: str = "short") -> str:
        """
        Format an epoch timestamp.

        Args:
            timestamp: Epoch seconds
            type_: A named format such as "short", or a strftime pattern
        """
        pattern = self._formats.get(type_, type_)
        return self.to_local(timestamp).strftime(pattern)


def create_date_formatter(
    tz_name: str = "Europe/London",
    short_format: str | None = None,
) -> LondonDateFormatter:
    """Factory function to create a date formatter."""
    formats = {"short": short_format} if short_format else None
    return LondonDateFormatter(tz_name, formats)
