from datetime import UTC, datetime


def to_rfc3339(value: datetime) -> str:
    """Render a timestamp as RFC 3339 UTC with second precision, e.g. ``2026-01-02T03:04:05Z``.

    Naive values are taken to be UTC (SQLite drops the offset).
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
