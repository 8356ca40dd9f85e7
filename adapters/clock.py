"""Wall clock producing sortable ISO-8601 UTC timestamps."""

from datetime import datetime, timezone


def format_timestamp(moment: datetime) -> str:
    """``2026-10-19T14:03:07.512Z``; lexical order equals time order."""
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SystemClock:
    def now(self) -> str:
        return format_timestamp(datetime.now(timezone.utc))
